"""Enumerated selectors used to pick a document template."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DocumentKind(str, Enum):
    ATP = "atp"
    BAST = "bast"


@dataclass(frozen=True, slots=True)
class Customer:
    id: str
    name: str
    full_name: str


@dataclass(frozen=True, slots=True)
class Regional:
    id: str
    name: str
    db_value: str


CUSTOMERS: tuple[Customer, ...] = (
    Customer(id="kin", name="KIN", full_name="KIN Template"),
    Customer(id="sip", name="SIP", full_name="SIP Template"),
    Customer(id="stp", name="STP", full_name="STP Template"),
    Customer(id="ibst", name="IBST", full_name="IBST Template"),
    Customer(id="pti", name="PTI", full_name="PTI Template"),
)

REGIONALS: tuple[Regional, ...] = (
    Regional(id="jabo1", name="Jabo Outer 1", db_value="Jabo Outer 1"),
    Regional(id="jabo2", name="Jabo Outer 2", db_value="Jabo Outer 2"),
    Regional(id="jabo3", name="Jabo Outer 3", db_value="Jabo Outer 3"),
)

_CUSTOMERS_BY_ID = {customer.id: customer for customer in CUSTOMERS}
_REGIONALS_BY_ID = {regional.id: regional for regional in REGIONALS}


def get_customer(customer_id: str) -> Customer:
    try:
        return _CUSTOMERS_BY_ID[customer_id]
    except KeyError:
        raise ValueError(f"unknown customer: {customer_id}") from None


def get_regional(regional_id: str) -> Regional:
    try:
        return _REGIONALS_BY_ID[regional_id]
    except KeyError:
        raise ValueError(f"unknown regional: {regional_id}") from None


__all__ = [
    "CUSTOMERS",
    "Customer",
    "DocumentKind",
    "REGIONALS",
    "Regional",
    "get_customer",
    "get_regional",
]
