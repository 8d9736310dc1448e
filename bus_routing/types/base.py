### Engine internal types - adjacency graph and search queue

import itertools as it, operator as op, functools as ft
import heapq

from . import public as tp
from .. import utils as u


log = u.get_logger('br.graph')


class Graph:
	'''Adjacency lists of outgoing ride segments for each stop id.
		Walk segments are not included, as schedule-aware search only follows rides.
		Not changed after build(), so can be shared between any number of queries.'''

	def __init__(self): self.set_idx = dict() # {stop_id: [segment, ...]}

	@classmethod
	def build(cls, stops, segments):
		'''Build graph from stops (iterable or {id: stop} mapping) and segments.
			Segments starting at stops missing from the stops set are skipped.'''
		self = cls()
		if not isinstance(stops, dict): stops = dict((stop.id, stop) for stop in stops)
		for stop_id in stops: self.set_idx[stop_id] = list()
		skipped = 0
		for seg in segments:
			if seg.kind is not tp.SegmentKind.ride: continue
			try: self.set_idx[seg.stop_from.id].append(seg)
			except KeyError: skipped += 1
		if skipped:
			log.debug('Skipped ride segments from unknown stops: {:,}', skipped)
		log.debug( 'Built graph: stops={:,}, ride-segments={:,}',
			len(self.set_idx), sum(map(len, self.set_idx.values())) )
		return self

	def outgoing(self, stop):
		'List of ride segments from stop (Stop or id), empty for unknown stops.'
		if isinstance(stop, tp.Stop): stop = stop.id
		return self.set_idx.get(stop, list())

	def __contains__(self, stop):
		if isinstance(stop, tp.Stop): stop = stop.id
		return stop in self.set_idx
	def __len__(self): return len(self.set_idx)
	def __iter__(self): return iter(self.set_idx.items())


@u.attr_struct(eq=False)
@ft.total_ordering
class PrioItem:
	prio = u.attr_init()
	value = u.attr_init()

	def __hash__(self): return hash(self.prio)
	def __eq__(self, item): return self.prio == item.prio
	def __lt__(self, item): return self.prio < item.prio
	def __iter__(self): return iter((self.prio, self.value))

	@classmethod
	def get_factory(cls, attr_args):
		'''Returns factory to create PrioItem by extracting
				specified prio attrs (or extractor func, if callable) from values.
			Intended to work with "*attrs" arguments,
				where either single callable/string or individual attrs get passed.'''
		if isinstance(attr_args, str): attr_args = attr_args.split()
		if len(attr_args) == 1:
			if isinstance(attr_args[0], str): attr_args = attr_args[0].split()
			elif callable(attr_args[0]): attr_args = attr_args[0]
		if not callable(attr_args): attr_args = op.attrgetter(*attr_args)
		return lambda v: cls(attr_args(v), v)


class PrioQueue:
	'''Min-heap of values, ordered by specified prio attrs.
		Values with same prio are popped in the order they were pushed.'''

	def __init__(self, *prio_attrs):
		self.items, self.item_func = list(), PrioItem.get_factory(prio_attrs)
		self.seq = it.count()
	def __len__(self): return len(self.items)
	def push(self, value):
		item = self.item_func(value)
		heapq.heappush(self.items, (item, next(self.seq), item.value))
	def pop(self): return heapq.heappop(self.items)[-1]
