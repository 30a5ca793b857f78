# app/db/base.py
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import JSON, DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=naming_convention)

    # datas sempre com fuso; listas/dicts livres vão como JSON
    type_annotation_map = {
        datetime: DateTime(timezone=True),
        Dict[str, Any]: JSON,
        List[str]: JSON,
    }
