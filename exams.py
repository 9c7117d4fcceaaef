from __future__ import annotations
from typing import Dict, List, Optional

from errors import SyllabusNotFoundError
from models import Exam, Subject, Syllabus


def _subject(name: str, weight: float, kind: str, modules: int, topics: Optional[List[str]] = None,
             hours: Optional[float] = None, books: Optional[List[str]] = None) -> Subject:
    return Subject(
        name=name,
        weight=weight,
        type=kind,
        total_modules=modules,
        topics=topics or [],
        recommended_time=hours,
        reference_books=books or [],
    )


EXAMS: Dict[str, Exam] = {e.id: e for e in [
    Exam(
        id="ca_final", label="Chartered Accountancy (CA Final)", category="finance",
        exam_code="CA-FINAL", difficulty="extreme", duration="3-5 years", frequency="May & November",
        official_sites=["https://icai.org"], popularity=95,
        subjects=[
            _subject("Financial Reporting", 100, "Practical", 28,
                     ["Ind AS 115", "Consolidation", "Financial Instruments", "Fair Value"], 200,
                     ["Padhuka", "DSCL"]),
        ],
    ),
    Exam(
        id="cs_executive", label="Company Secretary (CS Executive)", category="finance",
        exam_code="CS-EXEC", difficulty="hard", duration="18-24 months", frequency="June & December",
        official_sites=["https://icsi.edu"], popularity=85,
        subjects=[
            _subject("Corporate Law", 100, "Theory", 25),
            _subject("Securities Law", 100, "Hybrid", 20),
            _subject("Economic Laws", 100, "Theory", 22),
            _subject("Tax Laws", 100, "Practical", 18),
            _subject("Governance", 100, "Theory", 15),
        ],
    ),
    Exam(
        id="upsc_cse", label="UPSC Civil Services (IAS/IPS)", category="government",
        exam_code="UPSC-CSE", difficulty="extreme", duration="12-18 months", frequency="Yearly",
        official_sites=["https://upsc.gov.in", "https://www.pib.gov.in"], popularity=98,
        subjects=[
            _subject("General Studies I", 200, "Theory", 40, ["History", "Geography", "Society"], 300),
        ],
    ),
    Exam(
        id="neet_ug", label="NEET UG (Medical Entrance)", category="medical",
        exam_code="NEET-UG", difficulty="extreme", duration="12-24 months", frequency="Yearly",
        official_sites=["https://nta.ac.in", "https://neet.nta.nic.in"], popularity=97,
        subjects=[
            _subject("Physics", 180, "Conceptual", 30,
                     ["Mechanics", "Optics", "Electromagnetism", "Modern Physics"], 250),
            _subject("Chemistry", 180, "Mixed", 28,
                     ["Organic", "Inorganic", "Physical", "Biomolecules"], 240),
            _subject("Biology", 360, "Memory", 45,
                     ["Zoology", "Botany", "Human Physiology", "Genetics"], 400),
        ],
    ),
    Exam(
        id="jee_main", label="JEE Main (Engineering)", category="engineering",
        exam_code="JEE-MAIN", difficulty="extreme", duration="24 months", frequency="Twice Yearly",
        official_sites=["https://jeemain.nta.nic.in"], popularity=96,
        subjects=[
            _subject("Physics", 100, "Conceptual", 25, ["Mechanics", "Thermodynamics", "Waves", "Modern"], 300),
            _subject("Chemistry", 100, "Mixed", 23, ["Physical", "Organic", "Inorganic"], 280),
            _subject("Mathematics", 100, "Problem", 28,
                     ["Calculus", "Algebra", "Coordinate", "Trigonometry"], 320),
        ],
    ),
    Exam(
        id="ssc_cgl", label="SSC CGL (Combined Graduate Level)", category="government",
        exam_code="SSC-CGL", difficulty="hard", duration="6-8 months", frequency="Yearly",
        official_sites=["https://ssc.nic.in"], popularity=90,
        subjects=[
            _subject("General Intelligence", 50, "Logical", 15),
            _subject("General Awareness", 50, "Theory", 25),
            _subject("Quantitative Aptitude", 50, "Practical", 20),
            _subject("English Comprehension", 50, "Language", 18),
        ],
    ),
    Exam(
        id="gate", label="GATE (Graduate Aptitude Test)", category="engineering",
        exam_code="GATE", difficulty="extreme", duration="12 months", frequency="Yearly",
        official_sites=["https://gate.iitk.ac.in"], popularity=92,
        subjects=[
            _subject("Technical Subjects", 100, "Technical", 35),
            _subject("Engineering Mathematics", 15, "Theory", 12),
            _subject("General Aptitude", 15, "Logical", 10),
        ],
    ),
    Exam(
        id="clat", label="CLAT (Law Entrance)", category="law",
        exam_code="CLAT", difficulty="hard", duration="12 months", frequency="Yearly",
        official_sites=["https://consortiumofnlus.ac.in"], popularity=88,
        subjects=[
            _subject("Legal Reasoning", 150, "Logical", 20),
            _subject("Logical Reasoning", 70, "Logical", 15),
            _subject("English Language", 70, "Language", 18),
            _subject("Current Affairs", 70, "Dynamic", 25),
            _subject("Quantitative Techniques", 40, "Practical", 12),
        ],
    ),
    Exam(
        id="nda", label="NDA (National Defence Academy)", category="defense",
        exam_code="NDA", difficulty="hard", duration="6-8 months", frequency="Twice Yearly",
        official_sites=["https://upsc.gov.in"], popularity=85,
        subjects=[
            _subject("Mathematics", 300, "Practical", 25),
            _subject("General Ability Test", 600, "Theory", 40),
        ],
    ),
    Exam(
        id="ibps_po", label="IBPS PO (Probationary Officer)", category="banking",
        exam_code="IBPS-PO", difficulty="hard", duration="6 months", frequency="Yearly",
        official_sites=["https://ibps.in"], popularity=89,
        subjects=[
            _subject("Reasoning Ability", 60, "Logical", 20),
            _subject("English Language", 40, "Language", 18),
            _subject("Quantitative Aptitude", 50, "Practical", 22),
            _subject("General Awareness", 40, "Theory", 30),
            _subject("Computer Knowledge", 20, "Technical", 12),
        ],
    ),
    Exam(
        id="cat", label="CAT (MBA Entrance)", category="management",
        exam_code="CAT", difficulty="extreme", duration="12 months", frequency="Yearly",
        official_sites=["https://iimcat.ac.in"], popularity=94,
        subjects=[
            _subject("Quantitative Ability", 66, "Practical", 25),
            _subject("Verbal Ability", 66, "Language", 22),
            _subject("Logical Reasoning", 66, "Logical", 20),
            _subject("Data Interpretation", 66, "Practical", 18),
        ],
    ),
    Exam(
        id="cma_final", label="CMA (Cost & Management Accountant)", category="finance",
        exam_code="CMA-FINAL", difficulty="hard", duration="18-24 months", frequency="June & December",
        official_sites=["https://icmai.in"], popularity=82,
        subjects=[
            _subject("Strategic Cost Management", 100, "Practical", 20),
            _subject("Strategic Performance Management", 100, "Practical", 18),
            _subject("Direct Tax Laws", 100, "Hybrid", 22),
            _subject("Indirect Tax Laws", 100, "Hybrid", 20),
        ],
    ),
]}


def all_exams() -> List[Exam]:
    return list(EXAMS.values())


def get_exam(exam_id: str) -> Optional[Exam]:
    return EXAMS.get(exam_id)


def get_syllabus(exam_id: str) -> Syllabus:
    exam = get_exam(exam_id)
    if exam is None:
        raise SyllabusNotFoundError(exam_id)
    if not exam.subjects:
        raise SyllabusNotFoundError(exam_id, "exam has no subjects")
    return exam.syllabus()


def search_exams(query: str, category: Optional[str] = None) -> List[Exam]:
    q = query.strip().lower()
    return [
        e for e in EXAMS.values()
        if (q in e.label.lower() or q in e.exam_code.lower())
        and (category is None or e.category == category)
    ]


def recommended_exams(category: Optional[str] = None, limit: int = 6) -> List[Exam]:
    pool = [e for e in EXAMS.values() if category is None or e.category == category]
    pool.sort(key=lambda e: e.popularity, reverse=True)
    return pool[:limit]
