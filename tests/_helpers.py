import asyncio
import uuid


def random_metric_name(prefix: str = 'metric_') -> str:
    """Unique, already-normalised metric/label name."""
    return f"{prefix}{uuid.uuid4().hex}"


def scrape(metrics) -> str:
    """Run one full scrape (calculators + render) synchronously."""
    return asyncio.run(metrics.get_metrics())
