from typing import TypeVar, Generic, Type, Any, Optional, Dict
from sqlalchemy.orm import Session
from app.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)

class CRUDBase(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]): self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    def create(self, db: Session, data: Dict[str, Any], commit: bool = True) -> ModelType:
        """commit=False só faz flush: o chamador fecha a transação."""
        obj = self.model(**data)
        db.add(obj)
        if commit:
            db.commit(); db.refresh(obj)
        else:
            db.flush()
        return obj
