import itertools as it, operator as op, functools as ft
import enum, bisect

from .. import utils as u


class NetworkError(Exception): pass


### Network input data

# Network consists of a set of stops, a set of lines
#  (each with weekly departure schedule) and a set of ride/walk segments.
# Stop-to-line and stop-to-stop relations are kept in
#  Lines/Segments indexes, keyed by stop id, and not on Stop objects.


@u.attr_struct(repr=False, eq=False)
class Stop:
	keys = 'id address lat lon'
	def __hash__(self): return hash(self.id)
	def __eq__(self, stop): return u.same_type_and_id(self, stop)
	def __repr__(self):
		if not self.address: return '<Stop {}>'.format(self.id)
		return '<Stop {} [{}]>'.format(self.id, self.address)

class Stops:
	def __init__(self): self.set_idx = dict()

	def add(self, stop):
		if stop.id in self.set_idx: stop = self.set_idx[stop.id]
		else: self.set_idx[stop.id] = stop
		return stop

	def get(self, stop):
		if isinstance(stop, Stop): stop = stop.id
		return self.set_idx.get(stop)

	def find(self, query):
		'Lookup stop by its code (int or numeric string) or case-insensitive address.'
		if isinstance(query, int) or query.strip().isdigit(): return self.get(int(query))
		query = query.strip().lower()
		for stop in self:
			if stop.address and stop.address.lower() == query: return stop

	def __getitem__(self, stop_id): return self.set_idx[stop_id]
	def __contains__(self, stop): return self.get(stop) is not None
	def __len__(self): return len(self.set_idx)
	def __iter__(self): return iter(self.set_idx.values())


def wait_time(departures, dtm):
	'''Return wait time (minutes) from dtm until the first departure at or after it.
		Departures must be sorted in ascending order.
		None is returned if there are no more departures on that day.'''
	n = bisect.bisect_left(departures, dtm)
	if n == len(departures): return None
	return departures[n] - dtm


class Line:
	'''Line - named sequence of stops with weekly departures schedule.
		Order of stops defines line direction.
		Departure times are for the start of the line, but are
			used as-is to calculate wait time at any of its stops.'''

	def __init__(self, id, name=None, stops=None):
		self.id, self.name = id, name or id
		self.stops, self.schedule = list(stops or list()), dict() # {day: [dtm, ...]}

	def __repr__(self): return '<Line {}>'.format(self.id)

	def add_departure(self, day, dtm):
		bisect.insort(self.schedule.setdefault(day, list()), dtm)

	def departures_on(self, day):
		'Ascending sequence of departure times for day of week, empty if none.'
		return tuple(self.schedule.get(day, list()))

	def index(self, stop):
		try: return self.stops.index(stop)
		except ValueError: return None

	def stop_pairs(self): return zip(self.stops, self.stops[1:])

	def __hash__(self): return hash(self.id)
	def __eq__(self, line): return u.same_type_and_id(self, line)
	def __len__(self): return len(self.stops)
	def __iter__(self): return iter(self.stops)

# Pseudo-line for walking legs, never registered with Lines
foot_line = Line('WALK', 'on foot')


class Lines:

	def __init__(self): self.set_idx, self.idx_stop = dict(), dict()

	def add(self, *lines):
		for line in lines:
			if line.id in self.set_idx:
				raise NetworkError('Duplicate line id: {!r}'.format(line.id))
			self.set_idx[line.id] = line
			for stop in line.stops:
				stop_lines = self.idx_stop.setdefault(stop.id, list())
				if line not in stop_lines: stop_lines.append(line)

	def lines_with_stop(self, stop):
		'All lines going through stop, in the order of their registration.'
		if isinstance(stop, Stop): stop = stop.id
		return self.idx_stop.get(stop, list())

	def get(self, line_id): return self.set_idx.get(line_id)
	def __getitem__(self, line_id): return self.set_idx[line_id]
	def __contains__(self, line_id): return line_id in self.set_idx
	def __len__(self): return len(self.set_idx)
	def __iter__(self): return iter(self.set_idx.values())


class SegmentKind(enum.Enum): ride, walk = 1, 2

def segment_key(stop_from, stop_to, kind=SegmentKind.ride):
	if isinstance(stop_from, Stop): stop_from = stop_from.id
	if isinstance(stop_to, Stop): stop_to = stop_to.id
	return stop_from, stop_to, kind

@u.attr_struct(repr=False)
class Segment:
	stop_from = u.attr_init()
	stop_to = u.attr_init()
	dt = u.attr_init()
	kind = u.attr_init(SegmentKind.ride)

	@property
	def key(self): return segment_key(self.stop_from, self.stop_to, self.kind)

	def __repr__(self):
		return '<Segment {0.stop_from.id}-{0.stop_to.id} {0.kind.name} dt={0.dt}>'.format(self)

def segment_stops(segments):
	'All stops referenced by any of the segments, as {stop_id: stop} mapping.'
	stops = dict()
	for seg in segments:
		for stop in seg.stop_from, seg.stop_to: stops.setdefault(stop.id, stop)
	return stops

class Segments:
	'''Segment set, keyed by (stop_from_id, stop_to_id, kind) tuples.
		Any {key: segment} mapping can be used in its place for planning queries.'''

	def __init__(self):
		self.set_idx, self.idx_walk = dict(), dict()

	def add(self, segment):
		'''Add segment to the set, raising NetworkError on duplicate keys.
			Walk segments are indexed as connecting both stops, regardless of direction.'''
		if segment.key in self.set_idx:
			raise NetworkError('Duplicate segment: {}'.format(segment.key))
		self.set_idx[segment.key] = segment
		if segment.kind is SegmentKind.walk:
			for a, b in [(segment.stop_from, segment.stop_to), (segment.stop_to, segment.stop_from)]:
				stops = self.idx_walk.setdefault(a.id, list())
				if b not in stops: stops.append(b)
		return segment

	def get(self, stop_from, stop_to, kind=SegmentKind.ride):
		return self.set_idx.get(segment_key(stop_from, stop_to, kind))

	def walk_stops(self, stop):
		'Stops reachable on foot directly from specified one.'
		if isinstance(stop, Stop): stop = stop.id
		return self.idx_walk.get(stop, list())

	def stops(self): return segment_stops(self)

	def keys(self): return self.set_idx.keys()
	def values(self): return self.set_idx.values()
	def __getitem__(self, key): return self.set_idx[key]
	def __contains__(self, key): return key in self.set_idx
	def __len__(self): return len(self.set_idx)
	def __iter__(self): return iter(self.set_idx.values())


@u.attr_struct
class Network: keys = 'stops lines segments'



### Planning results

@u.attr_struct(repr=False)
class Leg:
	line = u.attr_init() # Line, foot_line or None if it can't be determined
	stop_from = u.attr_init()
	stop_to = u.attr_init()
	dt = u.attr_init()
	dt_wait = u.attr_init(0)
	dtm_dep = u.attr_init(None) # only set for schedule-bound legs

	@property
	def walking(self): return self.line is foot_line

	@property
	def dtm_arr(self):
		if self.dtm_dep is None: return
		return self.dtm_dep + self.dt

	def __repr__(self):
		line_id = self.line.id if self.line is not None else None
		return '<Leg {} {}-{} dt={}>'.format(line_id, self.stop_from.id, self.stop_to.id, self.dt)

@u.attr_struct(slots=False, repr=False)
class Itinerary:
	legs = u.attr_init(list)

	def append_leg(self, *leg_args, **leg_kws):
		leg = Leg(*leg_args, **leg_kws)
		assert not self.legs or self.legs[-1].stop_to == leg.stop_from, [self.legs[-1], leg]
		self.legs.append(leg)
		return self

	@property
	def stop_src(self): return self.legs[0].stop_from
	@property
	def stop_dst(self): return self.legs[-1].stop_to

	@property
	def dt(self): return sum(map(op.attrgetter('dt'), self.legs))
	@property
	def dt_wait(self): return sum(map(op.attrgetter('dt_wait'), self.legs))
	@property
	def dt_total(self): return self.dt + self.dt_wait

	@property
	def lines(self):
		'Lines used in the itinerary, without repeating same line for consecutive legs.'
		return list(line for line, legs in it.groupby(map(op.attrgetter('line'), self.legs)))

	def __len__(self): return len(self.legs)
	def __iter__(self): return iter(self.legs)
	def __getitem__(self, n): return self.legs[n]

	def __repr__(self):
		points = list()
		for leg in self.legs:
			if not points: points.append(str(leg.stop_from.id))
			points.append('[{}] {}'.format(leg.line.id if leg.line is not None else '?', leg.stop_to.id))
		return '<Itinerary[ {} ]>'.format(' - '.join(points))

	def pretty_print(self, indent=0, **print_kws):
		p = lambda tpl,*a,**k: print(' '*indent + tpl.format(*a,**k), **print_kws)
		stop_name = lambda stop:\
			'{} [{}]'.format(stop.address, stop.id) if stop.address else str(stop.id)

		p( 'Itinerary (legs: {}, lines: {}, duration: {} min, waiting: {} min):',
			len(self.legs), len(self.lines), self.dt_total, self.dt_wait )
		for leg in self.legs:
			if leg.walking: p('  walk (time: {} min):', leg.dt)
			else:
				line = '{} ({})'.format(leg.line.id, leg.line.name) if leg.line is not None else 'unknown line'
				p('  line {} (time: {} min):', line, leg.dt)
			if leg.dtm_dep is not None:
				p( '    from (dep at {}, after {} min wait): {}',
					u.dtm_format(leg.dtm_dep), leg.dt_wait, stop_name(leg.stop_from) )
				p('    to (arr at {}): {}', u.dtm_format(leg.dtm_arr), stop_name(leg.stop_to))
			else:
				p('    from: {}', stop_name(leg.stop_from))
				p('    to: {}', stop_name(leg.stop_to))


@u.attr_struct
class CandidateSet:
	'Ordered list of itineraries, in the order they were found.'
	itineraries = u.attr_init(list)

	def add(self, itinerary): self.itineraries.append(itinerary)

	def __len__(self): return len(self.itineraries)
	def __iter__(self): return iter(self.itineraries)
	def __getitem__(self, n): return self.itineraries[n]

	def pretty_print(self, indent=0, **print_kws):
		print(' '*indent + 'Itinerary set ({}):'.format(len(self.itineraries)), **print_kws)
		for itinerary in self.itineraries:
			print(**print_kws)
			itinerary.pretty_print(indent=indent+2, **print_kws)
