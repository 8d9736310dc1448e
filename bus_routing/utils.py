import itertools as it, operator as op, functools as ft
import os, sys, math, logging
import contextlib, tempfile, stat

import attr


class LogMessage:
	def __init__(self, fmt, a, k): self.fmt, self.a, self.k = fmt, a, k
	def __str__(self): return self.fmt.format(*self.a, **self.k) if self.a or self.k else self.fmt

class LogStyleAdapter(logging.LoggerAdapter):
	def __init__(self, logger, extra=None):
		super(LogStyleAdapter, self).__init__(logger, extra or {})
	def log(self, level, msg, *args, **kws):
		if not self.isEnabledFor(level): return
		log_kws = {} if 'exc_info' not in kws else dict(exc_info=kws.pop('exc_info'))
		msg, kws = self.process(msg, kws)
		self.logger._log(level, LogMessage(msg, args, kws), (), **log_kws)

get_logger = lambda name: LogStyleAdapter(logging.getLogger(name))


def attr_struct(cls=None, vals_to_attrs=False, defaults=..., **kws):
	if not cls:
		return ft.partial( attr_struct,
			vals_to_attrs=vals_to_attrs, defaults=defaults, **kws )
	try:
		keys = cls.keys
		del cls.keys
	except AttributeError: keys = list()
	else:
		attr_kws = dict()
		if defaults is not ...: attr_kws['default'] = defaults
		if isinstance(keys, str): keys = keys.split()
		for k in keys: setattr(cls, k, attr.ib(**attr_kws))
	if vals_to_attrs:
		for k, v in list(vars(cls).items()):
			if k.startswith('_') or k in keys or callable(v): continue
			setattr(cls, k, attr.ib(v))
	kws.setdefault('slots', True)
	return attr.s(cls, **kws)

def attr_init(factory_or_default=attr.NOTHING, **attr_kws):
	if callable(factory_or_default): factory_or_default = attr.Factory(factory_or_default)
	return attr.ib(default=factory_or_default, **attr_kws)


def same_type_and_id(v1, v2):
	return type(v1) is type(v2) and v1.id == v2.id



### Day-of-week and day-time values
# "dtm" values are clock times as int minutes from midnight (e.g. 10:05 -> 605).
# Days are ints 1-7, 1 being monday and 7 sunday (or holiday).

weekdays = 'monday tuesday wednesday thursday friday saturday sunday'.split()

def day_parse(day):
	if isinstance(day, str):
		day = day.strip().lower()
		if not day.isdigit():
			for n, name in enumerate(weekdays, 1):
				if len(day) >= 3 and name.startswith(day): return n
			raise ValueError('Unrecognized day of week: {!r}'.format(day))
	day = int(day)
	if not 1 <= day <= 7: raise ValueError('Day of week must be in 1-7 range: {}'.format(day))
	return day

def dtm_parse(dtm_str):
	if isinstance(dtm_str, int): return dtm_str
	dtm_vals = dtm_str.strip().split(':')
	if len(dtm_vals) == 3 and int(dtm_vals[2]) == 0: dtm_vals = dtm_vals[:2]
	if len(dtm_vals) != 2 or not all(v.strip().isdigit() for v in dtm_vals):
		raise ValueError('Malformed HH:MM time value: {!r}'.format(dtm_str))
	h, m = map(int, dtm_vals)
	if not (0 <= h <= 23 and 0 <= m <= 59):
		raise ValueError('Time value out of range: {!r}'.format(dtm_str))
	return h * 60 + m

def dtm_format(dtm):
	dtm_days, dtm = divmod(int(dtm), 24 * 60)
	dtm = '{:02d}:{:02d}'.format(*divmod(dtm, 60))
	if dtm_days: dtm = '{}+{}'.format(dtm_days, dtm)
	return dtm


def geo_distance(lat1, lon1, lat2, lon2, radius=6371, math=math):
	'''Great-circle distance between two lat/lon points (Haversine Formula),
		in same units as the sphere radius (km for default Earth radius).'''
	lat1, lon1, lat2, lon2 = (math.radians(float(v)) for v in [lat1, lon1, lat2, lon2])
	a = math.sin((lat2 - lat1)/2)**2 +\
		math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1)/2)**2
	return radius * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

def round_half_up(v): return int(math.floor(v + 0.5))


@contextlib.contextmanager
def safe_replacement(path, *open_args, mode=None, **open_kws):
	path = str(path)
	if mode is None:
		try: mode = stat.S_IMODE(os.lstat(path).st_mode)
		except OSError: pass
	open_kws.update( delete=False,
		dir=os.path.dirname(path) or '.', prefix=os.path.basename(path)+'.' )
	if not open_args: open_kws['mode'] = 'w'
	with tempfile.NamedTemporaryFile(*open_args, **open_kws) as tmp:
		try:
			if mode is not None: os.fchmod(tmp.fileno(), mode)
			yield tmp
			if not tmp.closed: tmp.flush()
			os.rename(tmp.name, path)
		finally:
			try: os.unlink(tmp.name)
			except OSError: pass


pickle_log = get_logger('pickle')

def pickle_dump(state, name):
	import pickle
	with safe_replacement(name, 'wb') as dst:
		pickle_log.debug('Pickling data (type={}) to: {}', state.__class__.__name__, name)
		pickle.dump(state, dst)

def pickle_load(name):
	import pickle
	with open(str(name), 'rb') as src:
		pickle_log.debug('Unpickling data from: {}', name)
		return pickle.load(src)
