"""Qt-facing components.

Adapters that expose the headless view model to PyQt6 views. Importing this
package requires PyQt6; the rest of ``datagrid`` does not.
"""
