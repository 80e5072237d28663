"""
Test support for rulebundle tests.

Test doubles and shared inputs that are imported directly rather than
injected as pytest fixtures: the fake rule engine, rule source texts and
fact types.
"""
