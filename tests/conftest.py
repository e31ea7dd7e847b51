import os
import sys

# Make the package importable from a source checkout and the shared
# factories importable from every test module.
tests_dir = os.path.abspath(os.path.dirname(__file__))
project_root = os.path.dirname(tests_dir)
for path in (project_root, tests_dir):
    if path not in sys.path:
        sys.path.insert(0, path)
