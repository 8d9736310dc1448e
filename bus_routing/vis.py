# Visualization tools, mostly useful for debugging

import itertools as it, operator as op, functools as ft
from collections import defaultdict
import contextlib

from . import utils as u, types as t


print_fmt = lambda tpl, *a, file=None, end='\n', **k:\
	print(tpl.format(*a,**k), file=file, end=end)

dot_str = lambda n: '"{}"'.format(str(n).replace('"', '\\"'))
dot_html = lambda n: '<{}>'.format(n)
html_escape = lambda n: str(n).replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


@contextlib.contextmanager
def dot_graph(dst, dot_opts, indent=2):
	print_fmt('digraph {{', file=dst)
	if isinstance(indent, int): indent = ' '*indent
	p = lambda tpl, *a, end='\n', **k:\
		print_fmt(indent + tpl, *a, file=dst, end=end, **k)
	p('### Defaults')
	for node_type, opts in (dot_opts or dict()).items():
		p('{} [ {} ]'.format(node_type, ', '.join('{}={}'.format(k, v) for k, v in opts.items())))
	yield p
	print_fmt('}}', file=dst)


def dot_for_network(network, dst, dot_opts=None):
	'''Dump stops as nodes (labelled with lines/positions on them),
		ride segments as solid edges (labelled with line ids) and walk segments as dashed ones.'''
	stop_names = defaultdict(set)
	for line in network.lines:
		for n, stop in enumerate(line.stops):
			stop_names[stop].add('{}[{}]'.format(line.id, n))
	for seg in network.segments.values():
		for stop in seg.stop_from, seg.stop_to: stop_names.setdefault(stop, set())

	with dot_graph(dst, dot_opts) as p:

		p('')
		p('### Labels')
		for stop, line_names in sorted(stop_names.items(), key=lambda v: v[0].id):
			label = '<b>{}</b>{}'.format( html_escape(stop.address or stop.id),
				'<br/>- '.join([''] + sorted(map(html_escape, line_names))) )
			name = stop_names[stop] = 'stop-{}'.format(stop.id)
			p('{} [label={}]'.format(dot_str(name), dot_html(label)))

		p('')
		p('### Edges')
		for seg in network.segments.values():
			name_src, name_dst = (stop_names[stop] for stop in [seg.stop_from, seg.stop_to])
			if seg.kind is t.public.SegmentKind.walk:
				p('{} -> {} [style=dashed, dir=both, label={}]', *map(dot_str, [
					name_src, name_dst, '{} min'.format(seg.dt) ]))
				continue
			lines = list( line.id for line in network.lines.lines_with_stop(seg.stop_from)
				if (seg.stop_from, seg.stop_to) in line.stop_pairs() )
			label = '{} ({} min)'.format(', '.join(lines) or '?', seg.dt)
			p('{} -> {} [label={}]', *map(dot_str, [name_src, name_dst, label]))
