"""modelex's core data structures and associated support code.

.. raw:: html

   <h2>Submodules</h2>

.. autosummary::
   :toctree:

   errors
   matchers
   modes
   regex
   registry
   renderer
   response
   tree
   utils
"""
