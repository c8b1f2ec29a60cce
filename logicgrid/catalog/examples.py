"""
Worked example puzzles.

travel_puzzle:    3 categories x 4 (people, years, destinations)
dog_show_puzzle:  4 categories x 4 (dogs, breeds, skills, ranks)

Both have exactly one solution. Each clue below is the manual translation of
the sentence quoted next to it.
"""

from typing import Callable, Dict

from logicgrid.catalog.types import PuzzleDefinition
from logicgrid.puzzle.clues import CellClue, OffsetClue


def travel_puzzle() -> PuzzleDefinition:
    """
    Four friends each took one trip, in four consecutive years.

    Solution:
        Amanda  2013  London
        Jack    2016  Tokyo
        Mike    2015  Sydney
        Rachel  2014  Rio de Janeiro
    """
    clues = [
        # 1. Jack went to Tokyo.
        CellClue(("people", "Jack"), ("destinations", "Tokyo")),
        # 2. The Tokyo trip was the year after the Sydney trip.
        OffsetClue("years", ("destinations", "Tokyo"), ("destinations", "Sydney"), 1),
        # 3. Amanda travelled in 2013.
        CellClue(("people", "Amanda"), ("years", "2013")),
        # 4. Rachel did not go to London.
        CellClue(("people", "Rachel"), ("destinations", "London"), 0),
        # 5. Mike travelled the year after Rachel.
        OffsetClue("years", ("people", "Mike"), ("people", "Rachel"), 1),
        # 6. Somebody went to Rio de Janeiro in 2014.
        CellClue(("years", "2014"), ("destinations", "Rio de Janeiro")),
    ]
    return PuzzleDefinition(
        name="travel",
        categories={
            "people": ["Amanda", "Jack", "Mike", "Rachel"],
            "years": ["2013", "2014", "2015", "2016"],
            "destinations": ["London", "Rio de Janeiro", "Sydney", "Tokyo"],
        },
        clues=clues,
        anchor="people",
        description="Who travelled where, and when?",
    )


def dog_show_puzzle() -> PuzzleDefinition:
    """
    Four dogs ran an agility course; each has a breed, a best obstacle and a
    final rank.

    Solution:
        Beany    Terrier   Tire    2
        Cheetah  Collie    Tunnel  1
        Suzie    Boxer     Plank   4
        Thor     Shepherd  Poles   3
    """
    clues = [
        # 1. Cheetah is the Collie.
        CellClue(("dogs", "Cheetah"), ("breeds", "Collie")),
        # 2. The dog that aced the Tunnel came first.
        CellClue(("skills", "Tunnel"), ("ranks", "1")),
        # 3. Thor finished one place after Beany.
        OffsetClue("ranks", ("dogs", "Thor"), ("dogs", "Beany"), 1),
        # 4. The Boxer finished last.
        CellClue(("breeds", "Boxer"), ("ranks", "4")),
        # 5. The Terrier aced the Tire.
        CellClue(("breeds", "Terrier"), ("skills", "Tire")),
        # 6. Thor aced the Poles.
        CellClue(("dogs", "Thor"), ("skills", "Poles")),
        # 7. The Plank dog finished one place after the Poles dog.
        OffsetClue("ranks", ("skills", "Plank"), ("skills", "Poles"), 1),
    ]
    return PuzzleDefinition(
        name="dog_show",
        categories={
            "dogs": ["Beany", "Cheetah", "Suzie", "Thor"],
            "breeds": ["Boxer", "Collie", "Shepherd", "Terrier"],
            "skills": ["Plank", "Poles", "Tire", "Tunnel"],
            "ranks": ["1", "2", "3", "4"],
        },
        clues=clues,
        anchor="dogs",
        description="Which dog is which breed, aced which obstacle, and placed where?",
    )


EXAMPLES: Dict[str, Callable[[], PuzzleDefinition]] = {
    "travel": travel_puzzle,
    "dog_show": dog_show_puzzle,
}
