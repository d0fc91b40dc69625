"""Export functionality for CSV and JSON."""

import json
from typing import Any, Dict, Sequence

import pandas as pd

from ..config.schema import Config
from ..views import DerivedStreamView


def _friendly_kwargs(config: Config = None) -> Dict[str, Any]:
    if config is None:
        return {}
    return {'max_safe_integer': config.views.max_safe_integer}


def views_to_dataframe(views: Sequence[DerivedStreamView], config: Config = None) -> pd.DataFrame:
    """Friendly projections of the views, one row per stream."""
    kwargs = _friendly_kwargs(config)
    return pd.DataFrame([view.to_friendly(**kwargs) for view in views])


def export_csv(views: Sequence[DerivedStreamView], filepath: str, config: Config = None):
    """Export stream views to CSV."""
    df = views_to_dataframe(views, config)
    df.to_csv(filepath, index=False)


def export_json(views: Sequence[DerivedStreamView], filepath: str, config: Config = None):
    """Export stream views to JSON."""
    kwargs = _friendly_kwargs(config)
    export_data = {
        'config_hash': config.compute_hash() if config is not None else None,
        'streams': [view.to_friendly(**kwargs) for view in views],
        # Totals can exceed exact JSON numbers
        'totals': {
            'allocation_assigned': str(sum(view.allocation_assigned for view in views)),
            'withdrawable_amount': str(sum(view.withdrawable_amount for view in views)),
            'funds_left_in_stream': str(sum(view.funds_left_in_stream for view in views)),
        },
    }

    with open(filepath, 'w') as f:
        json.dump(export_data, f, indent=2)
