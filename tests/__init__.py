"""sepgen test suite.

Test organization:
- test_identity.py, test_errors.py, test_logging_config.py: shared library
- test_cli.py: batch command line
- tui/: field model, visibility rules, navigation, XML output, session,
  settings and the prompt_toolkit form
"""
