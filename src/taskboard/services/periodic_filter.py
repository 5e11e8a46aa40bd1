"""Eligibility of rule-linked tasks for the schedule views."""

from __future__ import annotations

from collections.abc import Iterable

from taskboard.models import PeriodicInterval, PeriodicTask, Task


def schedulable_rules(rules: Iterable[PeriodicTask]) -> dict[str, PeriodicInterval]:
    """Map rule id to interval, leaving out start-up triggers."""
    return {rule.id: rule.interval for rule in rules if rule.interval.is_schedulable}


def filter_tasks(tasks: Iterable[Task], enabled_rules: Iterable[PeriodicTask]) -> list[Task]:
    """Drop tasks linked to a rule that is disabled, unknown or a start-up trigger.

    Tasks without a rule link are always kept. The result only depends on
    the inputs, so filtering an already-filtered list is a no-op.
    """
    rule_map = schedulable_rules(enabled_rules)
    return [
        task
        for task in tasks
        if not task.periodic_rule_id or task.periodic_rule_id in rule_map
    ]


def startup_rules(rules: Iterable[PeriodicTask]) -> list[PeriodicTask]:
    """Rules that fire when the scheduler starts instead of on the calendar."""
    return [rule for rule in rules if not rule.interval.is_schedulable]
