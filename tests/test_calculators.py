import asyncio

import pytest

from p2p_metrics import CalculatorError
from tests._helpers import random_metric_name, scrape


def test_scalar_calculators_are_summed(metrics):
    name = random_metric_name()
    metrics.register_metric(name, calculate=lambda: 3)
    metrics.register_metric(name, calculate=lambda: 4)

    assert f"{name} 7.0" in scrape(metrics)


def test_scalar_calculation_overwrites_instead_of_adding(metrics):
    name = random_metric_name()
    metric = metrics.register_metric(name, calculate=lambda: 3)
    metric.update(100)

    scrape(metrics)
    scrape(metrics)

    assert metric.get() == 3


def test_group_calculators_overwrite_per_key(metrics):
    name = random_metric_name()
    label = random_metric_name('label_')
    metrics.register_metric_group(name, label=label, calculate=lambda: {'k': 1, 'only_first': 10})
    metrics.register_metric_group(name, label=label, calculate=lambda: {'k': 2})

    report = scrape(metrics)
    assert f'{name}{{{label}="k"}} 2.0' in report
    assert f'{name}{{{label}="only_first"}} 10.0' in report


def test_no_calculators_leaves_value_alone(metrics):
    name = random_metric_name()
    metric = metrics.register_metric(name)
    metric.update(42)

    scrape(metrics)

    assert metric.get() == 42


def test_add_calculator_after_registration(metrics):
    name = random_metric_name()
    counter = metrics.register_counter(name)
    counter.add_calculator(lambda: 2)
    counter.add_calculator(lambda: 2)

    assert f"{name}_total 4.0" in scrape(metrics)


def test_mixed_sync_and_async_calculators(metrics):
    name = random_metric_name()

    async def slow():
        await asyncio.sleep(0.01)
        return 5

    metrics.register_metric(name, calculate=slow)
    metrics.register_metric(name, calculate=lambda: 1)

    assert f"{name} 6.0" in scrape(metrics)


def test_calculators_run_on_every_scrape(metrics):
    name = random_metric_name()
    calls = []

    def calculate():
        calls.append(1)
        return len(calls)

    metrics.register_metric(name, calculate=calculate)

    assert f"{name} 1.0" in scrape(metrics)
    assert f"{name} 2.0" in scrape(metrics)


def test_failing_calculator_propagates(metrics):
    name = random_metric_name()

    def boom():
        raise RuntimeError('sampler offline')

    metrics.register_metric(name, calculate=boom)

    with pytest.raises(CalculatorError) as excinfo:
        scrape(metrics)
    assert excinfo.value.metric == name
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_group_failure_keeps_partial_writes(metrics):
    name = random_metric_name()
    label = random_metric_name('label_')
    group = metrics.register_metric_group(name, label=label, calculate=lambda: {'ok': 1})

    async def boom():
        await asyncio.sleep(0)
        raise RuntimeError('late failure')

    metrics.register_metric_group(name, label=label, calculate=boom)

    with pytest.raises(CalculatorError):
        scrape(metrics)
    assert group.get('ok') == 1


def test_concurrent_scrapes_each_run_calculators(metrics):
    name = random_metric_name()
    calls = []

    async def calculate():
        calls.append(1)
        await asyncio.sleep(0)
        return 1

    metrics.register_metric(name, calculate=calculate)

    async def _run():
        return await asyncio.gather(metrics.get_metrics(), metrics.get_metrics())

    reports = asyncio.run(_run())
    assert len(calls) == 2
    assert all(f"{name} 1.0" in r for r in reports)
