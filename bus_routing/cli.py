import itertools as it, operator as op, functools as ft
import sys

import bus_routing as br


def main(args=None):
	conf, conf_engine = br.data.DataConf(), br.engine.EngineConf()

	import argparse
	parser = argparse.ArgumentParser(
		description='Bus trip planner for a fixed network of stops, lines and weekly schedules.')
	parser.add_argument('data_dir_or_pickle',
		help='Path to network data directory or a pickled network object (if points to a file).'
			' Data directory should have following ";"-separated files:'
				' {0.stops_file}, {0.lines_file}, {0.schedules_file}, {0.segments_file}.'.format(conf))

	group = parser.add_argument_group('Basic network/parser options')
	group.add_argument('--cache-network', metavar='path',
		help='Store parsed network data (in pickle format) to specified file.'
			' This file can then be used in place of data dir, and should load faster.')

	group = parser.add_argument_group('Misc/debug options')
	group.add_argument('--dot-for-lines', metavar='path',
		help='Dump Stop/Line graph (in graphviz dot format) to a specified file and exit.')
	group.add_argument('--dot-opts', metavar='yaml-data',
		help='Options for graphviz graph/nodes/edges to use with'
			' --dot-for-lines, as a YAML mappings. Example: {graph: {rankdir: LR}}')
	group.add_argument('--engine-conf', metavar='yaml-data',
		help='Override values for EngineConf as a YAML mapping.'
			' Example: {walk_speed_kmh: 4, log_search_steps: true}')
	group.add_argument('--debug', action='store_true', help='Verbose operation mode.')

	cmds = parser.add_subparsers(title='Commands', dest='call')


	cmd = cmds.add_parser('cache',
		help='Parse and store network data (see --cache-network) and exit.')


	cmd = cmds.add_parser('stops',
		help='List all stops with lines that go through them and walking connections.')


	cmd = cmds.add_parser('plan',
		help='Plan trip between two stops, output resulting itineraries.')
	cmd.add_argument('stop_from', help='Stop code or address to start trip at. Example: 31')
	cmd.add_argument('stop_to', help='Stop code or address to end trip at. Example: 75')
	cmd.add_argument('day', nargs='?', default='1',
		help='Day of week for the trip, either as number'
			' (1 - monday, 7 - sunday/holiday) or weekday name. Default: %(default)s')
	cmd.add_argument('day_time', nargs='?', default='00:00',
		help='Day time to be ready to start trip at, as HH:MM. Default: %(default)s')
	cmd.add_argument('-s', '--strategy',
		choices=sorted(br.engine.strategies) + ['all'], default='shortest',
		help='Planning strategy to use, or "all" to run each one in turn. Default: %(default)s')


	opts = parser.parse_args(sys.argv[1:] if args is None else args)

	br.u.logging.basicConfig(
		format='%(asctime)s :: %(name)s %(levelname)s :: %(message)s',
		datefmt='%Y-%m-%d %H:%M:%S',
		level=br.u.logging.DEBUG if opts.debug else br.u.logging.WARNING )

	if opts.engine_conf:
		import yaml
		for k, v in (yaml.safe_load(opts.engine_conf) or dict()).items():
			if not hasattr(conf_engine, k):
				parser.error('Unrecognized engine conf option: {!r} (value: {!r})'.format(k, v))
			setattr(conf_engine, k, v)

	if opts.call == 'plan':
		try: day, dtm = br.u.day_parse(opts.day), br.u.dtm_parse(opts.day_time)
		except ValueError as err: parser.error(str(err))

	network, planner = br.init_planner(
		opts.data_dir_or_pickle, network_dump=opts.cache_network,
		conf=conf, conf_engine=conf_engine, timer_func=br.calc_timer )

	dot_opts = dict()
	if opts.dot_opts:
		import yaml
		dot_opts = yaml.safe_load(opts.dot_opts)
	if opts.dot_for_lines:
		with br.u.safe_replacement(opts.dot_for_lines) as dst:
			br.vis.dot_for_network(network, dst, dot_opts=dot_opts)
		return

	if not opts.call or opts.call == 'cache': pass

	elif opts.call == 'stops':
		for stop in sorted(network.stops, key=op.attrgetter('id')):
			print('{} [{}] ({}, {})'.format(stop.id, stop.address, stop.lat, stop.lon))
			lines = network.lines.lines_with_stop(stop)
			if lines: print('  lines: {}'.format(', '.join(line.id for line in lines)))
			walk = network.segments.walk_stops(stop)
			if walk: print('  walk to: {}'.format(', '.join(str(s.id) for s in walk)))

	elif opts.call == 'plan':
		a, b = map(network.stops.find, [opts.stop_from, opts.stop_to])
		for query, stop in [(opts.stop_from, a), (opts.stop_to, b)]:
			if not stop: parser.error('Stop not found: {!r}'.format(query))
		names = [opts.strategy] if opts.strategy != 'all' else list(br.engine.strategies)
		for name in names:
			planner.set_strategy(name)
			print('--- {} ({}, {}):'.format(name, br.u.weekdays[day-1], br.u.dtm_format(dtm)))
			planner.plan(a, b, day, dtm).pretty_print()
			print()

	else: parser.error('Action not implemented: {}'.format(opts.call))

if __name__ == '__main__': sys.exit(main())
