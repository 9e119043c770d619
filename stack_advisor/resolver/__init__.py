"""
Hard-constraint resolution for candidate stacks.

Modules
-------
rules     ConstraintRule dataclass and the built-in narrowing rules.
resolver  DecisionTreeResolver: applies rules in order, records eliminations.
"""
