"""
Tic-tac-go core Python package.

Pure-logic pieces of the push puzzle: board topology, the push/pull movement
primitive, the rule predicates, and the generator that builds solvable puzzles
by pulling markers backwards out of a solved position.
Modules:
- board.py: Board, Coord, Direction
- shape.py: randomized irregular board construction
- moves.py: apply_forward / apply_reverse
- rules.py: win, loss and deadlock predicates
- solver.py: bounded forward BFS used as a difficulty oracle
- generator.py: Difficulty, Puzzle, generate_puzzle, fallback_layout
- state.py, deal.py: play session helpers
"""
