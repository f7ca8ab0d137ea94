"""Pandas DataFrame adapters for generated EADV and rout tables."""

from typing import Dict, List, Mapping, Sequence

import pandas as pd  # type: ignore

from eadv_mocker.mocker import MockDataResult
from eadv_mocker.synthetic.generator import EadvRow, RoutRow

EADV_COLUMNS = ["eid", "att", "dt", "val"]


def eadv_to_dataframe(rows: Sequence[EadvRow]) -> pd.DataFrame:
    """Convert EADV rows to a pandas DataFrame.

    Args:
        rows: Sequence of EadvRow objects

    Returns:
        DataFrame with columns: eid, att, dt, val. Row order is preserved,
        so dates stay most recent first within each entity/attribute.

    Example:
        >>> result = generate_mock_data(ruleblocks, MockerOptions(seed=1))
        >>> eadv_df = eadv_to_dataframe(result.eadv)
        >>> eadv_df.groupby("att")["val"].mean()
    """
    if not rows:
        return pd.DataFrame(columns=EADV_COLUMNS)

    return pd.DataFrame(
        [{"eid": r.eid, "att": r.att, "dt": r.dt, "val": r.val} for r in rows],
        columns=EADV_COLUMNS,
    )


def rout_tables_to_dataframes(
    tables: Mapping[str, Sequence[RoutRow]],
) -> Dict[str, pd.DataFrame]:
    """Convert ``rout_*`` tables to one DataFrame each, ``eid`` first."""
    frames: Dict[str, pd.DataFrame] = {}
    for table, rows in tables.items():
        columns: List[str] = ["eid"]
        for row in rows:
            for name in row.values:
                if name not in columns:
                    columns.append(name)
        frames[table] = pd.DataFrame([row.as_dict() for row in rows], columns=columns)
    return frames


def mock_data_to_dataframes(result: MockDataResult) -> Dict[str, pd.DataFrame]:
    """All generated tables keyed by table name (``eadv`` plus ``rout_*``)."""
    frames = {"eadv": eadv_to_dataframe(result.eadv)}
    frames.update(rout_tables_to_dataframes(result.rout_tables))
    return frames
