"""
Poisoned waffle core package.

Modules:
- board.py: Cell, Coord, Board and the elimination rule
- history.py: generic snapshot undo/redo
- players.py, events.py: player capability and engine notifications
- engine.py: GameEngine (turns, termination, history)
- persistence.py: JSON save/load
- solver.py, strategies.py: computer opponents
- config.py, cli.py: settings and terminal front end
"""
