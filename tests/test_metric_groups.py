import time

from tests._helpers import random_metric_name, scrape


def _setup(metrics):
    name = random_metric_name()
    key = random_metric_name('key_')
    label = random_metric_name('label_')
    group = metrics.register_metric_group(name, label=label)
    return name, key, label, group


def test_set_metric_group(metrics):
    name, key, label, group = _setup(metrics)
    group.update({key: 5})

    assert f'{name}{{{label}="{key}"}} 5.0' in scrape(metrics)


def test_increment_metric_group_without_value(metrics):
    name, key, label, group = _setup(metrics)
    group.increment({key: False})

    assert f'{name}{{{label}="{key}"}} 1.0' in scrape(metrics)


def test_increment_metric_group_with_value(metrics):
    name, key, label, group = _setup(metrics)
    group.increment({key: 5})

    assert f'{name}{{{label}="{key}"}} 5.0' in scrape(metrics)


def test_decrement_metric_group_without_value(metrics):
    name, key, label, group = _setup(metrics)
    group.decrement({key: False})

    assert f'{name}{{{label}="{key}"}} -1.0' in scrape(metrics)


def test_decrement_metric_group_with_value(metrics):
    name, key, label, group = _setup(metrics)
    group.decrement({key: 5})

    assert f'{name}{{{label}="{key}"}} -5.0' in scrape(metrics)


def test_unit_step_entry_points(metrics):
    name, key, label, group = _setup(metrics)
    other = random_metric_name('key_')
    group.increment_keys([key, other])
    group.increment_keys([key])
    group.decrement_keys([other])

    assert group.get(key) == 2
    assert group.get(other) == 0


def test_calculate_metric_group(metrics):
    name = random_metric_name()
    key = random_metric_name('key_')
    label = random_metric_name('label_')
    metrics.register_metric_group(name, label=label, calculate=lambda: {key: 5})

    assert f'{name}{{{label}="{key}"}} 5.0' in scrape(metrics)


def test_async_calculate_metric_group(metrics):
    name = random_metric_name()
    key = random_metric_name('key_')
    label = random_metric_name('label_')

    async def calculate():
        return {key: 5}

    metrics.register_metric_group(name, label=label, calculate=calculate)

    assert f'{name}{{{label}="{key}"}} 5.0' in scrape(metrics)


def test_reset_metric_group(metrics):
    name, key, label, group = _setup(metrics)
    group.update({key: 5})
    assert f'{name}{{{label}="{key}"}} 5.0' in scrape(metrics)

    group.reset()

    assert f'{name}{{{label}="{key}"}} 0.0' in scrape(metrics)


def test_reset_clears_keys_set_through_other_handles(metrics):
    name, key, label, group = _setup(metrics)
    other_key = random_metric_name('key_')
    group.update({key: 1})
    metrics.register_metric_group(name, label=label).update({other_key: 2})

    group.reset()

    report = scrape(metrics)
    assert f'{name}{{{label}="{key}"}} 0.0' in report
    assert f'{name}{{{label}="{other_key}"}} 0.0' in report


def test_same_metric_group_from_multiple_reporters(metrics):
    name = random_metric_name()
    key1 = random_metric_name('key_')
    key2 = random_metric_name('key_')
    label = random_metric_name('label_')
    metrics.register_metric_group(name, label=label).update({key1: 5})
    metrics.register_metric_group(name, label=label).update({key2: 7})

    report = scrape(metrics)
    assert f'{name}{{{label}="{key1}"}} 5.0' in report
    assert f'{name}{{{label}="{key2}"}} 7.0' in report


def test_label_defaults_to_metric_name(metrics):
    name = random_metric_name()
    metrics.register_metric_group(name).update({'a': 1})

    assert f'{name}{{{name}="a"}} 1.0' in scrape(metrics)


def test_group_timer_records_key(metrics, monkeypatch):
    name, key, label, group = _setup(metrics)
    clock = iter([10.0, 10.25])
    monkeypatch.setattr(time, 'perf_counter', lambda: next(clock))

    stop = group.timer(key)
    stop()

    assert group.get(key) == 0.25


def test_timers_are_independent(metrics, monkeypatch):
    name, key, label, group = _setup(metrics)
    other = random_metric_name('key_')
    clock = iter([0.0, 1.0, 4.0, 6.0])
    monkeypatch.setattr(time, 'perf_counter', lambda: next(clock))

    stop_a = group.timer(key)
    stop_b = group.timer(other)
    stop_a()
    stop_b()

    assert group.get(key) == 4.0
    assert group.get(other) == 5.0
