# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the Domous OS platform.
"""

from enum import Enum


class PaymentStatus(str, Enum):
    """Lifecycle status shared by every payable-like entity."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class PaymentType(str, Enum):
    """Team payment kind."""
    SALARY = "salary"
    SERVICE = "service"


class EmploymentType(str, Enum):
    """Team member employment type."""
    FIXED = "fixed"
    VARIABLE = "variable"


class MemberStatus(str, Enum):
    """Team member status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class BillingCycle(str, Enum):
    """Recurrence of a company expense."""
    MONTHLY = "monthly"
    ANNUAL = "annual"
    ONE_TIME = "one_time"


class AutomationAction(str, Enum):
    """Phases the team automation endpoint can run."""
    ALL = "all"
    GENERATE_SALARIES = "generate_salaries"
    UPDATE_OVERDUE = "update_overdue"


class PayableKind(str, Enum):
    """Collections holding payable-like documents."""
    TEAM_PAYMENTS = "team_payments"
    PARTNER_COMMISSIONS = "partner_commissions"
    COMPANY_EXPENSES = "company_expenses"


class Period(str, Enum):
    """Named reporting periods accepted by the dashboards."""
    ONE_DAY = "1d"
    SEVEN_DAYS = "7d"
    FOURTEEN_DAYS = "14d"
    THIRTY_DAYS = "30d"
    NINETY_DAYS = "90d"
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    CUSTOM = "custom"
    ALL = "all"


class CompanyStatus(str, Enum):
    """Company account status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class AppRole(str, Enum):
    """Roles a user can hold within a company."""
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    GESTOR = "gestor"
    FINANCEIRO = "financeiro"
    OPERADOR = "operador"
