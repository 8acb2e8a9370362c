from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

from fincore.domain import Category, PaymentMethod, Record
from fincore.errors import ValidationError

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self.value = value

    def is_right(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Right({self.value!r})"


class Left(Either[E, T]):

    def __init__(self, error: E):
        self.error = error

    def is_right(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Left({self.error!r})"


@lru_cache(maxsize=32)
def _category_index(cats: Tuple[Category, ...]) -> Dict[str, Category]:
    return {c.id: c for c in cats}


@lru_cache(maxsize=32)
def _payment_method_index(methods: Tuple[PaymentMethod, ...]) -> Dict[str, PaymentMethod]:
    return {pm.id: pm for pm in methods}


def safe_category(cats, cat_id: Optional[str]) -> Maybe[Category]:
    if cat_id is None:
        return Nothing()
    cat = _category_index(tuple(cats)).get(cat_id)
    return Some(cat) if cat is not None else Nothing()


def safe_payment_method(methods, pm_id: Optional[str]) -> Maybe[PaymentMethod]:
    if pm_id is None:
        return Nothing()
    pm = _payment_method_index(tuple(methods)).get(pm_id)
    return Some(pm) if pm is not None else Nothing()


def validate_record(r: Record) -> Either[str, Record]:
    if r.amount is None or r.amount != r.amount or r.amount < 0:
        return Left(f"Amount must be a non-negative value, got {r.amount}")
    if not r.category_id:
        return Left("Category is required")
    return Right(r)


def ensure_valid(r: Record) -> Record:
    result = validate_record(r)
    if result.is_left():
        raise ValidationError(result.error)
    return r
