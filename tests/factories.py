from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from datagrid.app.config_store import GridConfig
from datagrid.models import ColumnDef
from datagrid.viewmodels.table_viewmodel import DataTableViewModel


@dataclass
class Member:
    id: str
    name: str
    age: Optional[int]
    role: str = "dev"


def people() -> List[Dict[str, Any]]:
    return [
        {"id": "1", "name": "Bob", "age": 40},
        {"id": "2", "name": "ana", "age": None},
        {"id": "3", "name": "Ann", "age": 25},
    ]


def people_columns() -> List[ColumnDef]:
    return [
        ColumnDef(id="name", header="Name", accessor="name", sortable=True),
        ColumnDef(id="age", header="Age", accessor=lambda r: r["age"], sortable=True),
    ]


def make_vm(rows=None, columns=None, config: GridConfig | None = None, **kwargs) -> DataTableViewModel:
    return DataTableViewModel(
        people() if rows is None else rows,
        identify=lambda r: r["id"],
        columns=people_columns() if columns is None else columns,
        config=config,
        **kwargs,
    )


def names(rows) -> List[str]:
    return [r["name"] for r in rows]


__all__ = ["Member", "people", "people_columns", "make_vm", "names"]
