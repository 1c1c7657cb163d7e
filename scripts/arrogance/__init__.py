"""
Arrogance Admin - terminal dashboard for Firebase users and routines.

Architecture:
- state.py: Session snapshot, messages, commands and the transition function
- commands.py: worker-side fetch commands (one completion message each)
- router.py / table.py / spinner.py: pure helpers used by the state machine
- render.py: pure Session -> styled frame renderer (plain str or rich Text)
- gateway.py / credentials.py: Firebase collaborators
- app.py: Textual runtime that feeds messages and executes commands

Extensibility points:
1. New collections: register a decoder in commands.DOCUMENT_DECODERS
2. New tabs: extend config.TABS and router.TAB_VIEWS (and DETAIL_VIEWS for row details)
3. New gateways: implement the protocols in providers.py
"""

__version__ = "0.1.0"
