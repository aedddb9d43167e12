"""
copulagof.runtime
=================

Execution infrastructure for experiment templates.

Key Components
--------------
- `ExperimentTemplate`: Base class for all experiment definitions
- `SequentialRunner`: Runs the units of work of a template one by one
- `ThreadPoolRunner`: Runs them on a thread pool, results in input order
"""
