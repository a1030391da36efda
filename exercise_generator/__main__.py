"""Support ``python -m exercise_generator``.

Execution is handed to :func:`exercise_generator.main`, the same function the
``exercise-generator`` console script calls, so both entry points accept the
same options.

Example
-------
Print a two-measure phrase exercise::

    python -m exercise_generator --timesig 4/4 --measures 2 --phrase
"""

from . import main

if __name__ == "__main__":
    main()
