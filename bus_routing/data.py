import itertools as it, operator as op, functools as ft
from pathlib import Path
import os, csv

from . import utils as u, types as t


log = u.get_logger('br.data')


@u.attr_struct(vals_to_attrs=True)
class DataConf:

	# All files are in the same data directory, with separator-delimited
	#  fields (no header line), blank lines are ignored.
	#  stops: code;address;lat;lon
	#  lines: code;name;stop_code;stop_code;...
	#  schedules: line_code;day;HH:MM - optional, with day being 1-7 or weekday name
	#  segments: stop_code_from;stop_code_to;minutes;kind
	stops_file = 'stops.txt'
	lines_file = 'lines.txt'
	schedules_file = 'schedules.txt'
	segments_file = 'segments.txt'
	separator = ';'

	# Segment kind codes used in segments file
	ride_kind = 1
	walk_kind = 2


def iter_data_rows(data_dir, filename, sep=';', empty_if_missing=False):
	'Yield (line_number, [value, ...]) tuples for all non-empty lines in data file.'
	p = Path(data_dir) / filename
	log.debug('Processing data file: {}', p)
	if empty_if_missing and not os.access(str(p), os.R_OK): return
	with p.open(encoding='utf-8-sig') as src:
		for n, row in enumerate(csv.reader(src, delimiter=sep), 1):
			row = list(v.strip() for v in row)
			if any(row): yield n, row


def parse_network(data_dir, conf=None):
	'''Parse Network from data directory.
		Bogus rows, as well as ones referencing unknown stops/lines
			or duplicating already-parsed data, are logged and skipped.'''
	if not conf: conf = DataConf()
	rows = ft.partial(iter_data_rows, data_dir, sep=conf.separator)
	def skip(filename, n, row, reason, *args):
		log.warning( 'Skipping data row (file: {}, line: {}): {!r} - {}',
			filename, n, conf.separator.join(row), reason.format(*args) )

	### Stops
	stops = t.public.Stops()
	for n, row in rows(conf.stops_file):
		try:
			code, address, lat, lon = row
			stop = t.public.Stop(int(code), address, float(lat), float(lon))
		except ValueError as err:
			skip(conf.stops_file, n, row, 'malformed stop ({})', err)
			continue
		if stop.id in stops:
			skip(conf.stops_file, n, row, 'duplicate stop code')
			continue
		stops.add(stop)

	### Lines
	lines = t.public.Lines()
	for n, row in rows(conf.lines_file):
		if len(row) < 2 or not row[0]:
			skip(conf.lines_file, n, row, 'no line code/name')
			continue
		line_stops = list()
		for stop_code in row[2:]:
			stop = stops.get(int(stop_code)) if stop_code.isdigit() else None
			if not stop:
				log.warning( 'Skipping unknown stop {!r} for'
					' line {!r} (file: {}, line: {})', stop_code, row[0], conf.lines_file, n )
				continue
			line_stops.append(stop)
		try: lines.add(t.public.Line(row[0], row[1], line_stops))
		except t.public.NetworkError as err: skip(conf.lines_file, n, row, '{}', err)

	### Schedules
	departures = 0
	for n, row in rows(conf.schedules_file, empty_if_missing=True):
		try:
			line_code, day, dtm = row
			day, dtm = u.day_parse(day), u.dtm_parse(dtm)
		except ValueError as err:
			skip(conf.schedules_file, n, row, 'malformed departure ({})', err)
			continue
		line = lines.get(line_code)
		if line is None:
			skip(conf.schedules_file, n, row, 'unknown line')
			continue
		line.add_departure(day, dtm)
		departures += 1

	### Segments
	segments = t.public.Segments()
	kinds = {conf.ride_kind: t.public.SegmentKind.ride, conf.walk_kind: t.public.SegmentKind.walk}
	for n, row in rows(conf.segments_file):
		try:
			code_from, code_to, dt, kind = row
			code_from, code_to, dt, kind = int(code_from), int(code_to), int(dt), int(kind)
		except ValueError as err:
			skip(conf.segments_file, n, row, 'malformed segment ({})', err)
			continue
		if kind not in kinds:
			skip(conf.segments_file, n, row, 'unknown segment kind')
			continue
		if dt < 0:
			skip(conf.segments_file, n, row, 'negative travel time')
			continue
		stop_from, stop_to = stops.get(code_from), stops.get(code_to)
		if not (stop_from and stop_to):
			skip(conf.segments_file, n, row, 'unknown stop')
			continue
		try: segments.add(t.public.Segment(stop_from, stop_to, dt, kinds[kind]))
		except t.public.NetworkError as err: skip(conf.segments_file, n, row, '{}', err)

	log.debug( 'Parsed network: stops={:,}, lines={:,}'
		' (departures={:,}), segments={:,}', len(stops), len(lines), departures, len(segments) )
	return t.public.Network(stops, lines, segments)
