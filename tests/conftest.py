import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import examace
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from examace.analysis.oracle import StaticOracle
from examace.core.models.questions import DocumentMetadata, FinalizedQuestion
from examace.store.jsonl_store import QuestionStore


# Three unrelated questions, long enough to pass the scanned-PDF check.
PAPER_TEXT = """\
UNIT - I
1. Explain the history and scope of operating systems. (10)
OR
2. Describe the characteristics of a distributed database. (10)
UNIT - III
3. Calculate the time and space complexity of merge sort algorithm. [12]
"""


# Common test fixtures
@pytest.fixture
def paper_text():
    """Return a small three-question paper."""
    return PAPER_TEXT


@pytest.fixture
def metadata_2021():
    return DocumentMetadata(subject_id="os", year=2021, semester="May", source_name="os_2021.txt")


@pytest.fixture
def metadata_2022():
    return DocumentMetadata(subject_id="os", year=2022, semester="May", source_name="os_2022.txt")


@pytest.fixture
def static_oracle():
    """Oracle that always answers 'not the same'."""
    return StaticOracle(answer=False)


@pytest.fixture
def tmp_store(tmp_path: Path):
    """Create an empty store under a temporary directory."""
    return QuestionStore(tmp_path / "store")


def make_question(
    text: str,
    year: int,
    concept_id=None,
    topic: str = "General Concepts",
    subject_id: str = "os",
) -> FinalizedQuestion:
    """Build a FinalizedQuestion with sensible defaults."""
    return FinalizedQuestion(
        text=text,
        normalized_text=text.lower(),
        concept_id=concept_id,
        marks=0,
        question_number="1",
        unit="General",
        topic=topic,
        year=year,
        subject_id=subject_id,
    )


@pytest.fixture
def question_factory():
    """Return the make_question helper."""
    return make_question
