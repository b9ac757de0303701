"""
core
----

Core assignment engine components:

- entities:
  Plain records exchanged with callers (workers, shifts, demand, assignments).

- AssignmentState:
  Encapsulate the demand units, candidate pairs, decision variables and
  objective terms of one scenario.

- ConstraintManager:
  Register and apply constraint functions in a controlled sequence.
"""
