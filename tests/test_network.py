import itertools as it, operator as op, functools as ft
import unittest

from . import _common as c

types = c.br.t.public


class NetworkTests(unittest.TestCase):

	def setUp(self):
		self.data = c.load_test_data('networks')['networks']
		self.network = c.network_from_data(self.data['transfer'])

	def test_stops_lookup(self):
		stops = self.network.stops
		self.assertEqual(stops.find('31').address, 'Av. Alem 100')
		self.assertIs(stops.find(50), stops[50])
		self.assertIs(stops.find('  roca 1200 '), stops[75])
		self.assertIsNone(stops.find('Roca 9999'))
		self.assertIsNone(stops.find('99'))
		self.assertIn(stops[70], stops)
		self.assertIn(70, stops)

	def test_lines_index(self):
		lines, stops = self.network.lines, self.network.stops
		self.assertEqual(list(l.id for l in lines.lines_with_stop(stops[50])), ['L1', 'L3'])
		self.assertEqual(list(l.id for l in lines.lines_with_stop(31)), ['L1'])
		self.assertEqual(lines.lines_with_stop(stops[70]), list())
		self.assertEqual(lines['L3'].index(stops[75]), 1)
		self.assertIsNone(lines['L3'].index(stops[31]))
		with self.assertRaises(types.NetworkError): lines.add(types.Line('L1'))

	def test_line_registered_once_per_stop(self):
		stops = self.network.stops
		loop = types.Line('LOOP', 'Loop', [stops[31], stops[50], stops[31]])
		self.network.lines.add(loop)
		self.assertEqual(
			list(l.id for l in self.network.lines.lines_with_stop(31)), ['L1', 'LOOP'] )

	def test_segments(self):
		segments, stops = self.network.segments, self.network.stops
		seg = segments.get(31, 50)
		self.assertEqual((seg.stop_from, seg.stop_to, seg.dt), (stops[31], stops[50], 12))
		self.assertIsNone(segments.get(50, 31))
		self.assertIsNone(segments.get(70, 75))
		self.assertEqual(segments.get(70, 75, types.SegmentKind.walk).dt, 6)
		self.assertIn(types.segment_key(stops[50], stops[75]), segments)
		with self.assertRaises(types.NetworkError):
			segments.add(types.Segment(stops[31], stops[50], 15))
		segments.add(types.Segment(stops[31], stops[50], 15, types.SegmentKind.walk))
		self.assertEqual(len(segments), 4)
		self.assertEqual(sorted(segments.stops()), [31, 50, 70, 75])

	def test_walk_segments_connect_both_stops(self):
		segments, stops = self.network.segments, self.network.stops
		self.assertEqual(segments.walk_stops(stops[70]), [stops[75]])
		self.assertEqual(segments.walk_stops(75), [stops[70]])
		self.assertEqual(segments.walk_stops(31), list())


class GraphTests(unittest.TestCase):

	def setUp(self):
		data = c.load_test_data('networks')['networks']
		self.network = c.network_from_data(data['transfer'])

	def test_build(self):
		graph = c.br.engine.build_graph(self.network.stops, self.network.segments)
		stops = self.network.stops
		self.assertEqual(len(graph), 4)
		self.assertEqual(list(seg.stop_to for seg in graph.outgoing(stops[31])), [stops[50]])
		self.assertEqual(list(seg.stop_to for seg in graph.outgoing(50)), [stops[75]])
		self.assertEqual(graph.outgoing(stops[75]), list())
		self.assertEqual(graph.outgoing(stops[70]), list()) # walk segments are not included
		self.assertEqual(graph.outgoing(12345), list())
		self.assertIn(stops[70], graph)
		self.assertNotIn(12345, graph)

	def test_unknown_stops_skipped(self):
		stops = self.network.stops
		graph = c.br.engine.build_graph([stops[50], stops[75]], self.network.segments)
		self.assertEqual(len(graph), 2)
		self.assertNotIn(31, graph)
		self.assertEqual(graph.outgoing(31), list())
		self.assertEqual(len(graph.outgoing(50)), 1)

	def test_empty(self):
		graph = c.br.engine.build_graph(list(), list())
		self.assertEqual(len(graph), 0)
		self.assertEqual(graph.outgoing(1), list())


class ScheduleTests(unittest.TestCase):

	def test_wait_time(self):
		departures = list(map(c.br.u.dtm_parse, ['09:50', '10:05', '10:20']))
		self.assertEqual(types.wait_time(departures, c.br.u.dtm_parse('10:00')), 5)
		self.assertEqual(types.wait_time(departures, c.br.u.dtm_parse('10:05')), 0)
		self.assertEqual(types.wait_time(departures, c.br.u.dtm_parse('00:00')), 590)
		self.assertIsNone(types.wait_time(departures, c.br.u.dtm_parse('10:21')))
		self.assertIsNone(types.wait_time(list(), 0))

	def test_line_departures(self):
		line = types.Line('L9')
		for day, dtm in [(1, '12:00'), (1, '08:30'), (3, '07:00'), (1, '10:15')]:
			line.add_departure(day, c.br.u.dtm_parse(dtm))
		self.assertEqual(line.departures_on(1), (510, 615, 720))
		self.assertEqual(line.departures_on(3), (420,))
		self.assertEqual(line.departures_on(2), ())
		self.assertEqual(types.wait_time(line.departures_on(1), 600), 15)
		self.assertIsNone(types.wait_time(line.departures_on(7), 600))


class UtilsTests(unittest.TestCase):

	def test_dtm(self):
		u = c.br.u
		self.assertEqual(u.dtm_parse('10:05'), 605)
		self.assertEqual(u.dtm_parse(' 00:00:00 '), 0)
		self.assertEqual(u.dtm_parse('23:59'), 1439)
		self.assertEqual(u.dtm_parse(42), 42)
		for bogus in '24:00', '10:60', '10', 'ab:cd', '10:05:30':
			with self.assertRaises(ValueError): u.dtm_parse(bogus)
		self.assertEqual(u.dtm_format(605), '10:05')
		self.assertEqual(u.dtm_format(24*60 + 5), '1+00:05')

	def test_day(self):
		u = c.br.u
		self.assertEqual(u.day_parse('1'), 1)
		self.assertEqual(u.day_parse(7), 7)
		self.assertEqual(u.day_parse('Mon'), 1)
		self.assertEqual(u.day_parse('sunday'), 7)
		self.assertEqual(u.day_parse('thu'), 4)
		for bogus in '0', '8', 'mo', 'funday', '':
			with self.assertRaises(ValueError): u.day_parse(bogus)

	def test_geo(self):
		u = c.br.u
		self.assertAlmostEqual(u.geo_distance(0, 0, 0.01, 0), 1.11195, places=4)
		self.assertEqual(u.geo_distance(-42.77, -65.04, -42.77, -65.04), 0)
		self.assertEqual(u.round_half_up(2.5), 3)
		self.assertEqual(u.round_half_up(2.49), 2)
		self.assertEqual(u.round_half_up(13.34), 13)


if __name__ == '__main__': unittest.main()
