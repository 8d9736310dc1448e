import itertools as it, operator as op, functools as ft
from collections import namedtuple

from . import utils as u, types as t


@u.attr_struct(vals_to_attrs=True)
class EngineConf:
	walk_speed_kmh = 5
	earth_radius_km = 6371
	log_search_steps = False # debug-log every stop settled in shortest-path search


def timer(func):
	'Calculation method wrapper for timer/progress logging.'
	return ft.wraps(func)(lambda s,*a,**k: s.timer_wrapper(func, s, *a, **k))


def build_graph(stops, segments):
	'Build adjacency Graph of ride segments (iterable or key-segment mapping) for stops.'
	if hasattr(segments, 'values'): segments = segments.values()
	return t.base.Graph.build(stops, segments)

def segment_line(lines, segment, segments):
	'''Find Line that operates specified ride segment, returning None if there is none.
		Lines going through segment start stop are checked in their registration order,
			and first one with matching consecutive stop pair is returned,
			so if several lines share same two consecutive stops, result depends on that order.'''
	for line in lines.lines_with_stop(segment.stop_from):
		for stop_a, stop_b in line.stop_pairs():
			if not (stop_a == segment.stop_from and stop_b == segment.stop_to): continue
			if t.public.segment_key(stop_a, stop_b) in segments: return line



class PlanStrategy:
	'''Base for trip planning algorithms, which are used via Planner.
		Each plan() call returns CandidateSet of itineraries, which can be empty.'''

	name = None

	def __init__(self, conf=None, timer_func=None):
		self.conf, self.log = conf or EngineConf(), u.get_logger('br.engine.{}'.format(self.name))
		self.timer_wrapper = timer_func if timer_func else lambda f,*a,**k: f(*a,**k)

	def __repr__(self): return '<{}>'.format(self.__class__.__name__)

	def plan(self, network, stop_src, stop_dst, day, dtm, segments):
		raise NotImplementedError


class ShortestPathStrategy(PlanStrategy):

	name = 'shortest'

	SearchNode = namedtuple('SearchNode', 'stop dt')
	SearchStep = namedtuple('SearchStep', 'segment line dt_wait dtm_dep')

	@timer
	def plan(self, network, stop_src, stop_dst, day, dtm, segments):
		'''Time-dependent shortest path (Dijkstra) query from stop_src to stop_dst,
				with rider being ready to depart at dtm (minutes) on specified day of week.
			Cost of each ride segment is the wait until next departure of its line
				(from time when rider gets to segment start) plus segment travel time.
			Segments without any departures left on that day are not used.
			Returns CandidateSet with only one least-total-time itinerary or an empty one.'''
		assert 1 <= day <= 7, day
		graph = build_graph(t.public.segment_stops(segments.values()), segments)

		# dt_best stop_id keys are only set for reachable stops
		dt_best, steps = {stop_src.id: 0}, dict() # {stop_id: dt}, {stop_id: SearchStep}
		queue = t.base.PrioQueue('dt')
		queue.push(self.SearchNode(stop_src, 0))

		while queue:
			stop, dt = queue.pop()
			if dt > dt_best[stop.id]: continue # stale entry, stop was settled with lower dt
			if self.conf.log_search_steps:
				self.log.debug('Settled stop {} at +{} min ({})', stop.id, dt, u.dtm_format(dtm + dt))
			if stop == stop_dst: break # non-negative costs - can't be improved upon

			for seg in graph.outgoing(stop):
				line, dtm_ready = segment_line(network.lines, seg, segments), dtm + dt
				if line is None: dt_wait = 0 # no schedule to wait for
				else:
					dt_wait = t.public.wait_time(line.departures_on(day), dtm_ready)
					if dt_wait is None: continue # no more departures on that day
				dt_next = dt + dt_wait + seg.dt
				dt_chk = dt_best.get(seg.stop_to.id)
				if dt_chk is not None and dt_next >= dt_chk: continue
				dt_best[seg.stop_to.id] = dt_next
				steps[seg.stop_to.id] = self.SearchStep(seg, line, dt_wait, dtm_ready + dt_wait)
				queue.push(self.SearchNode(seg.stop_to, dt_next))

		results = t.public.CandidateSet()
		if stop_dst.id not in steps:
			self.log.debug('No path found: {} -> {} (day={}, time={})',
				stop_src.id, stop_dst.id, day, u.dtm_format(dtm))
			return results

		path, stop = list(), stop_dst
		while stop.id in steps:
			path.append(steps[stop.id])
			stop = path[-1].segment.stop_from
		itinerary = t.public.Itinerary()
		for step in reversed(path):
			itinerary.append_leg( step.line,
				step.segment.stop_from, step.segment.stop_to,
				step.segment.dt, step.dt_wait, step.dtm_dep )
		results.add(itinerary)
		return results


class DirectLineStrategy(PlanStrategy):

	name = 'direct'

	@timer
	def plan(self, network, stop_src, stop_dst, day, dtm, segments):
		'''Find all lines going from stop_src to stop_dst without any transfers.
			Schedules (and so day/dtm) are not used here.
			Returns one itinerary per line, in the order
				in which lines were registered for stop_src.'''
		results = t.public.CandidateSet()
		for line in network.lines.lines_with_stop(stop_src):
			n_src, n_dst = line.index(stop_src), line.index(stop_dst)
			if n_src is None or n_dst is None or n_src >= n_dst: continue
			itinerary = t.public.Itinerary()
			for stop_a, stop_b in zip(line.stops[n_src:n_dst], line.stops[n_src+1:n_dst+1]):
				key = t.public.segment_key(stop_a, stop_b)
				if key not in segments:
					self.log.debug( 'Missing segment {}-{} for line'
						' {}, skipping it', stop_a.id, stop_b.id, line.id )
					break
				itinerary.append_leg(line, stop_a, stop_b, segments[key].dt)
			else: results.add(itinerary)
		return results


class WalkingStrategy(PlanStrategy):

	name = 'walk'

	@timer
	def plan(self, network, stop_src, stop_dst, day, dtm, segments):
		'Single walking leg, with time based on straight-line distance between stops.'
		km = u.geo_distance(
			stop_src.lat, stop_src.lon, stop_dst.lat, stop_dst.lon,
			radius=self.conf.earth_radius_km )
		dt = u.round_half_up(km / self.conf.walk_speed_kmh * 60)
		itinerary = t.public.Itinerary().append_leg(t.public.foot_line, stop_src, stop_dst, dt)
		return t.public.CandidateSet([itinerary])


strategies = dict((cls.name, cls) for cls in [
	ShortestPathStrategy, DirectLineStrategy, WalkingStrategy ])

def get_strategy(name, **strategy_kws):
	try: cls = strategies[name]
	except KeyError:
		raise ValueError('Unknown planning strategy: {!r}'.format(name)) from None
	return cls(**strategy_kws)


class Planner:
	'''Trip planner context, passing all queries to the currently set strategy.
		Strategy can be swapped between queries, with no changes to how they are made.'''

	def __init__(self, network, strategy='shortest', conf=None, timer_func=None):
		self.network, self.conf, self.timer_func = network, conf or EngineConf(), timer_func
		self.set_strategy(strategy)

	def set_strategy(self, strategy):
		'Set PlanStrategy object or create one by its name.'
		if isinstance(strategy, str):
			strategy = get_strategy(strategy, conf=self.conf, timer_func=self.timer_func)
		self.strategy = strategy

	def plan(self, stop_src, stop_dst, day, dtm, segments=None):
		if segments is None: segments = self.network.segments
		return self.strategy.plan(self.network, stop_src, stop_dst, day, dtm, segments)
