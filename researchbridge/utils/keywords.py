"""Resume keyword extraction and interest matching.

Only words on a research-topic whitelist are kept, so extracted keywords
can be fed straight into discovery searches and the scoring boost.
"""

import re
from collections import Counter

from pydantic import BaseModel


MAX_KEYWORDS = 30

RESEARCH_KEYWORDS: frozenset[str] = frozenset(
    {
        # Programming languages & tech
        "python", "javascript", "java", "cpp", "rust", "golang", "swift", "kotlin",
        "typescript", "scala", "haskell", "lisp", "matlab", "sql", "html", "css",
        # Machine learning & AI
        "machine", "learning", "deep", "neural", "networks", "nlp", "computer",
        "vision", "artificial", "intelligence", "algorithm", "algorithms",
        "classifier", "regression", "clustering", "supervised", "unsupervised",
        "reinforcement", "tensorflow", "pytorch", "keras", "scikit",
        # Data science & analytics
        "analytics", "big", "hadoop", "spark", "database", "databases", "nosql",
        "mongodb", "postgresql", "statistics", "statistical", "visualization",
        "tableau", "power", "excel", "pandas", "numpy",
        # Biology & life sciences
        "biology", "biological", "genetics", "genetic", "genomics", "genomic",
        "protein", "proteins", "dna", "rna", "molecular", "cell", "cellular",
        "immunology", "immune", "microbiology", "microbial", "neuroscience",
        "neuroscientific", "pharmacology", "drug", "diseases", "disease",
        "vaccine", "vaccines", "cancer", "oncology", "evolution", "evolutionary",
        # Tissue engineering & regenerative medicine
        "tissue", "engineering", "regeneration", "regenerative", "regenerate",
        "biomaterial", "biomaterials", "cartilage", "chondrocytes", "bone", "osteo",
        "scaffold", "scaffolds", "hydrogel", "hydrogels", "chitosan",
        "decellularized", "biocompatibility", "biocompatible", "bioengineering",
        "biofabrication", "mscs", "stem", "progenitor", "fibroblasts", "neurons",
        "growth", "factor", "egf", "tgf", "vegf", "fgf",
        # Chemistry & materials
        "chemistry", "chemical", "organic", "inorganic", "synthesis", "analytical",
        "biochemistry", "polymer", "pharmaceutical", "catalyst", "catalysis",
        # Physics & materials
        "physics", "quantum", "particle", "materials", "nanotechnology", "nano",
        "optics", "photonics", "thermodynamics", "energy", "nuclear",
        # Environmental & climate
        "climate", "environmental", "sustainability", "renewable", "carbon",
        "emissions", "weather", "ocean", "atmosphere", "geology", "ecological",
        # Engineering
        "civil", "mechanical", "electrical", "software", "robotics", "automation",
        "controls", "systems", "circuit", "circuits", "biomechanics",
        "biomechanical", "orthopedic", "orthopedics",
        # Medicine & health
        "medicine", "clinical", "surgery", "diagnosis", "diagnostic", "treatment",
        "therapy", "patient", "hospital", "epidemiology", "epidemiological",
        "psychiatry", "psychiatric", "psychology", "behavioral", "mental",
        "parkinson", "alzheimer", "autism", "schizophrenia", "depression",
        "anxiety", "adhd", "addiction", "addictions", "fentanyl", "opioid",
        "fracture", "fractures", "injury", "injuries", "cardiac",
        "cardiovascular", "responder", "cpr", "aed", "emergency",
        # Lab techniques & equipment
        "assay", "assays", "culture", "pcr", "chromatography", "extraction",
        "spectrophotometry", "gel", "electrophoresis", "microscopy", "microscope",
        "imaging", "microscopic", "rheology", "rheological", "sem", "mri",
        "immunoassay", "blot", "western", "elisa", "flow", "cytometry", "mtt",
        "titration", "dilution", "staining", "histology",
        # Research methods & concepts
        "qualitative", "quantitative", "experiment", "experimental", "hypothesis",
        "theory", "theoretical", "simulation", "model", "modeling", "prediction",
        "optimization", "framework", "benchmark", "performance", "testing",
        "validation", "verification", "randomized", "trial", "cohort",
        "crossover", "longitudinal", "observational",
        # Economics & social sciences
        "economics", "economic", "finance", "financial", "business", "marketing",
        "sociology", "anthropology", "political", "policy", "governance", "social",
        # Other fields
        "mathematics", "mathematical", "geometry", "topology", "logic",
        "philosophy", "ethics", "history", "literature", "linguistics",
        "education", "pedagogy", "architecture", "design",
        # Specific conditions & health
        "arthritis", "osteoarthritis", "rheumatoid", "degenerative",
        "neurodegeneration", "cognitive", "dementia", "stroke", "heart",
        "hypertension",
    }
)


class KeywordMatch(BaseModel):
    keyword: str
    frequency: int


def normalize_text(text: str) -> str:
    """Lowercase, replace non-alphanumerics with spaces, collapse whitespace."""
    text = re.sub(r"[^a-z0-9 ]", " ", text.lower())
    return re.sub(r"\s+", " ", text).strip()


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[KeywordMatch]:
    """Whitelisted research keywords in ``text``, most frequent first.

    Words of two characters or fewer are ignored. Ties keep first-seen order.
    """
    words = [w for w in normalize_text(text).split() if len(w) > 2]
    counts = Counter(w for w in words if w in RESEARCH_KEYWORDS)

    return [
        KeywordMatch(keyword=keyword, frequency=frequency)
        for keyword, frequency in counts.most_common(limit)
    ]


def matched_interests(interests: list[str], user_interests: list[str]) -> list[str]:
    """User interests that overlap (substring either way) any listed interest."""
    listed = [n for n in (normalize_text(i) for i in interests) if n]
    wanted = [n for n in (normalize_text(i) for i in user_interests) if n]

    return [w for w in wanted if any(p in w or w in p for p in listed)]
