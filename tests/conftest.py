import sys
from pathlib import Path

import pytest

# Ensure repo root is on sys.path so `import handreplay` works under all pytest import modes.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


HEADS_UP_TEXT = """PokerStars Hand #2001: Hold'em No Limit (50/100) - 2024/01/01 12:00:00 ET
Table 'Alpha' 2-max Seat #1 is the button
Seat 1: A (1000 in chips)
Seat 2: B (1000 in chips)
A: posts small blind 50
B: posts big blind 100
*** HOLE CARDS ***
A: raises 200 to 300
B: folds
*** SUMMARY ***
A collected 450 from pot
"""

SIX_MAX_TEXT = """PokerStars Hand #2002: Hold'em No Limit (50/100) - 2024/01/01 12:05:00 ET
Table 'Alpha' 6-max Seat #3 is the button
Seat 1: carol (5000 in chips)
Seat 2: dave (4000 in chips)
Seat 3: erin (6000 in chips)
Seat 4: frank (3000 in chips)
Seat 5: gina (7000 in chips)
Seat 6: hank (2500 in chips)
carol: posts the ante 10
dave: posts the ante 10
erin: posts the ante 10
frank: posts the ante 10
gina: posts the ante 10
hank: posts the ante 10
frank: posts small blind 50
gina: posts big blind 100
*** HOLE CARDS ***
Dealt to dave [Ah Kh]
hank: folds
carol: folds
dave: raises 200 to 300
erin: calls 300
frank: folds
gina: calls 200
*** FLOP *** [7s Jd 2c]
gina: checks
dave: bets 400
erin: folds
gina: calls 400
*** TURN *** [7s Jd 2c] [Kc]
gina: checks
dave: bets 900
gina: folds
Uncalled bet (900) returned to dave
dave collected 1810 from pot
*** SUMMARY ***
Total pot 1810 | Rake 0
Board [7s Jd 2c Kc]
Seat 1: carol folded before Flop (didn't bet)
Seat 2: dave collected (1810)
Seat 3: erin (button) folded on the Flop
Seat 4: frank (small blind) folded before Flop
Seat 5: gina (big blind) folded on the Turn
Seat 6: hank folded before Flop (didn't bet)
"""

# Newest hand first, as the client writes its log.
HISTORY_TEXT = SIX_MAX_TEXT + "\n\n" + HEADS_UP_TEXT


@pytest.fixture
def heads_up_text() -> str:
    return HEADS_UP_TEXT


@pytest.fixture
def six_max_text() -> str:
    return SIX_MAX_TEXT


@pytest.fixture
def history_text() -> str:
    return HISTORY_TEXT


@pytest.fixture
def heads_up_hand():
    from handreplay.parser import parse_hand

    return parse_hand(HEADS_UP_TEXT)


@pytest.fixture
def six_max_hand():
    from handreplay.parser import parse_hand

    return parse_hand(SIX_MAX_TEXT)


@pytest.fixture
def history_file(tmp_path) -> Path:
    path = tmp_path / "history.txt"
    path.write_text(HISTORY_TEXT, encoding="utf-8")
    return path
