"""
DTR Pathology - The built-in quiz.

Six pathology photos (A-F), each treated by one pair of dental hand
instruments. Tool labels are the instrument pair numbers the classifier
was trained on.
"""

from .cases import Case, CaseCatalog

TOOLS = ["1-2", "7-8", "9-10", "11-12", "13-14", "17-18"]

PATHOLOGY_CASES = [
    Case(
        id="A.png",
        image="A.png",
        expected_answer="7-8",
        description="Tartar buildup on lower molars",
        harmful_answer="17-18",
        harmful_reason="Using drill on tartar can damage healthy enamel",
    ),
    Case(
        id="B.png",
        image="B.png",
        expected_answer="11-12",
        description="Deep cavity requiring excavation",
        harmful_answer="7-8",
        harmful_reason="Scaler cannot treat deep cavities - excavation needed",
    ),
    Case(
        id="C.png",
        image="C.png",
        expected_answer="1-2",
        description="General oral inspection needed",
        harmful_answer="11-12",
        harmful_reason="Never drill during general inspection without diagnosis",
    ),
    Case(
        id="D.png",
        image="D.png",
        expected_answer="9-10",
        description="Suspected occlusal decay",
        harmful_answer="13-14",
        harmful_reason="Incorrect tool - explorer needed for decay detection",
    ),
    Case(
        id="E.png",
        image="E.png",
        expected_answer="13-14",
        description="Supragingival calculus",
        harmful_answer="17-18",
        harmful_reason="Drill is excessive for calculus removal",
    ),
    Case(
        id="F.png",
        image="F.png",
        expected_answer="17-18",
        description="Enamel preparation required",
        harmful_answer="7-8",
        harmful_reason="Scaler insufficient for enamel preparation",
    ),
]


def create_dtr_catalog() -> CaseCatalog:
    """Create the built-in DTR pathology catalog."""
    return CaseCatalog(labels=TOOLS, cases=PATHOLOGY_CASES, name="dtr_pathology")
