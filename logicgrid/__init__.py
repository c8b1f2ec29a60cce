"""
logicgrid: logic-grid puzzles as binary integer programs.

Pipeline: PuzzleModel (categories + pair grids + constraints)
          -> solver.lp_solver (PuLP / CBC)
          -> solver.decoding (SolutionTable)
"""

__version__ = "0.1.0"
