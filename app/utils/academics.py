# app/utils/academics.py
import re
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from app.models.user import User


def normalize_grade(raw: Optional[str]) -> Optional[str]:
    """'1°', '1ro', '1er' -> '1'. Só 1..10."""
    if not raw:
        return None
    digits = re.sub(r"[^\d]", "", str(raw))
    if not digits:
        return None
    n = int(digits)
    if 1 <= n <= 10:
        return str(n)
    return None


def normalize_group(raw: Optional[str]) -> Optional[str]:
    """Primeira letra A-Z."""
    if not raw:
        return None
    m = re.search(r"[A-Z]", str(raw).strip().upper())
    return m.group(0) if m else None


def split_grade_group(raw: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """'1A', '2-B', '3° a', '10 C' -> (grau, grupo)."""
    if not raw:
        return None, None
    return normalize_grade(raw), normalize_group(raw)


def build_multi_term_search(terms: List[str]) -> Optional[ColumnElement]:
    """AND entre termos; cada termo procura em vários campos (OR)."""
    safe = [t.strip() for t in terms if t and t.strip()]
    if not safe:
        return None

    def per_term(term: str):
        like = f"%{term}%"
        conds = [
            User.name.ilike(like),
            User.paternal_surname.ilike(like),
            User.maternal_surname.ilike(like),
            User.email.ilike(like),
            User.phone.ilike(like),
            User.matricula.ilike(like),
            User.educational_program.ilike(like),
            User.provenance.ilike(like),
        ]
        grade = normalize_grade(term)
        if grade:
            conds.append(User.grade == grade)
        # só termos curtos tipo "A" ou "2A" viram filtro de grupo
        group = normalize_group(term) if len(term) <= 3 else None
        if group:
            conds.append(User.group_name == group)
        return or_(*conds)

    return and_(*[per_term(t) for t in safe])
