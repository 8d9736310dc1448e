import itertools as it, operator as op, functools as ft
from pathlib import Path
import time

from . import engine, vis, data, utils as u, types as t


def calc_timer(func, *args, log=u.get_logger('br.timer'), timer_name=None, **kws):
	if not timer_name:
		func_base = func if not isinstance(func, ft.partial) else func.func
		timer_name = '.'.join([func_base.__module__.strip('__'), func_base.__qualname__])
	log.debug('[{}] Starting...', timer_name)
	td = time.monotonic()
	res = func(*args, **kws)
	td = time.monotonic() - td
	log.debug('[{}] Finished in: {:.3f}s', timer_name, td)
	return res


def init_planner(
		data_path, network_dump=None, conf=None, conf_engine=None,
		strategy='shortest', timer_func=None, log=u.get_logger('br.init') ):
	'''Load Network from data directory (or pickled Network file)
			and return it along with the Planner for it, using specified strategy.
		Network parsed from directory is pickled to network_dump path, if specified.'''
	if not conf: conf = data.DataConf()

	network_func = data.parse_network
	if timer_func: network_func = ft.partial(timer_func, network_func)

	data_path = Path(data_path)
	if data_path.is_file():
		network_load = u.pickle_load
		if timer_func: network_load = ft.partial(timer_func, network_load, timer_name='network_load')
		network = network_load(data_path)
	else:
		network = network_func(data_path, conf)
		if network_dump: u.pickle_dump(network, network_dump)
	log.debug(
		'Loaded network: stops={:,}, lines={:,}, segments={:,}',
		len(network.stops), len(network.lines), len(network.segments) )

	planner = engine.Planner(network, strategy, conf=conf_engine, timer_func=timer_func)
	return network, planner
