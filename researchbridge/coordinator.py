"""
CLI Coordinator Module

Wires the fetch layer, the scoring pipeline and the recommendation step
together behind a small command-line interface:

    researchbridge discover --area "tissue engineering" --city Vancouver
    researchbridge resume --input resume.txt
    researchbridge professors --roster data/professors.json --interests genomics
    researchbridge profile --interests "genomics,neuroscience"

Scored results are rendered as rich tables. The user profile (interests
and resume keywords) lives in a JSON key-value store.
"""

import argparse
import asyncio
import uuid
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from researchbridge import __version__
from researchbridge.models.config import SystemParams
from researchbridge.models.professor import Professor
from researchbridge.models.researcher import Researcher
from researchbridge.models.score import Score
from researchbridge.recommendations import (
    Recommendation,
    daily_seed,
    rank_recommendations,
)
from researchbridge.scoring.pipeline import score_professors, score_researchers
from researchbridge.sources.discovery import (
    DiscoveryQuery,
    DiscoveryQueryError,
    DiscoveryResult,
    discover_for_keywords,
    discover_researchers,
)
from researchbridge.sources.openalex import OpenAlexClient, SourceError
from researchbridge.sources.roster import filter_by_interests, load_roster
from researchbridge.utils.keywords import extract_keywords
from researchbridge.utils.logger import configure_logging, get_logger
from researchbridge.utils.storage import JsonFileStore, KeyValueStore


PROFILE_KEY = "profile"
DEFAULT_STORE = "data/profile.json"
DEFAULT_ROSTER = "data/professors.json"


def split_csv(value: Optional[str]) -> list[str]:
    """Split a comma-separated CLI value, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def format_stars(stars: float) -> str:
    """Render a half-star rating, e.g. 3.5 -> "★★★½"."""
    full = int(stars)
    return "★" * full + ("½" if stars - full >= 0.5 else "")


class CLICoordinator:
    """
    Runs CLI commands against configured sources and the scoring pipeline.

    Holds the loaded SystemParams, the profile store and the console so
    commands can be driven from tests without argparse.
    """

    def __init__(
        self,
        system_params: Optional[SystemParams] = None,
        store: Optional[KeyValueStore] = None,
        console: Optional[Console] = None,
        correlation_id: Optional[str] = None,
    ):
        """
        Initialize CLI Coordinator.

        Args:
            system_params: Loaded configuration (defaults if None)
            store: Profile store (in-project JSON file if None)
            console: Rich console for output
            correlation_id: Correlation ID for logging (auto-generated if None)
        """
        self.system_params = system_params or SystemParams()
        self.store = store or JsonFileStore(DEFAULT_STORE)
        self.console = console or Console()
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.logger = get_logger(
            correlation_id=self.correlation_id,
            phase="coordinator",
            component="cli_coordinator",
        )

    # Profile

    def load_profile(self) -> dict:
        profile = self.store.get(PROFILE_KEY, default={}) or {}
        return {
            "interests": list(profile.get("interests", [])),
            "resume_keywords": list(profile.get("resume_keywords", [])),
        }

    def save_profile(
        self,
        interests: Optional[list[str]] = None,
        resume_keywords: Optional[list[str]] = None,
    ) -> dict:
        """Update the stored profile; None leaves a field unchanged."""
        profile = self.load_profile()
        if interests is not None:
            profile["interests"] = interests
        if resume_keywords is not None:
            profile["resume_keywords"] = resume_keywords
        self.store.set(PROFILE_KEY, profile)
        self.logger.info(
            "Profile saved",
            interests=len(profile["interests"]),
            resume_keywords=len(profile["resume_keywords"]),
        )
        return profile

    def _client(self) -> OpenAlexClient:
        return OpenAlexClient(
            self.system_params.sources, correlation_id=self.correlation_id
        )

    # Researchers

    async def discover(
        self,
        query: DiscoveryQuery,
        keywords: Optional[list[str]] = None,
        client: Optional[OpenAlexClient] = None,
    ) -> tuple[DiscoveryResult, dict[str, Score]]:
        """Run one discovery search and score the returned batch."""
        if client is None:
            async with self._client() as owned:
                return await self.discover(query, keywords, owned)

        result = await discover_researchers(
            client,
            query,
            config=self.system_params.discovery,
            policy=self.system_params.scoring.researcher,
        )
        scores = score_researchers(
            result.researchers,
            keywords,
            self.system_params.scoring.researcher,
            self.correlation_id,
        )
        return result, scores

    async def discover_from_keywords(
        self,
        keywords: list[str],
        client: Optional[OpenAlexClient] = None,
    ) -> tuple[list[Researcher], dict[str, Score]]:
        """Fan out one area search per keyword and score the merged batch."""
        if client is None:
            async with self._client() as owned:
                return await self.discover_from_keywords(keywords, owned)

        researchers = await discover_for_keywords(
            client,
            keywords,
            config=self.system_params.discovery,
            policy=self.system_params.scoring.researcher,
            max_concurrent=self.system_params.sources.max_concurrent_requests,
        )
        scores = score_researchers(
            researchers,
            keywords,
            self.system_params.scoring.researcher,
            self.correlation_id,
        )
        return researchers, scores

    # Professors

    def rank_professors(
        self,
        roster_path: Path | str,
        interests: list[str],
        keywords: Optional[list[str]] = None,
        seed: Optional[str] = None,
        limit: int = 8,
    ) -> tuple[list[Professor], dict[str, Score], list[Recommendation]]:
        """Filter the roster by interests, score it and pick recommendations."""
        roster = load_roster(roster_path, correlation_id=self.correlation_id)
        professors = filter_by_interests(roster, interests)
        scores = score_professors(
            professors,
            keywords if keywords is not None else interests,
            self.system_params.scoring.professor,
            self.correlation_id,
        )

        recommendations = self.recommend(professors, scores, interests, seed, limit)

        self.logger.info(
            "Professors ranked",
            roster=len(roster),
            matched=len(professors),
            recommendations=len(recommendations),
        )
        return professors, scores, recommendations

    def recommend(
        self,
        entities: Sequence[Researcher] | Sequence[Professor],
        scores: dict[str, Score],
        interests: Optional[list[str]] = None,
        seed: Optional[str] = None,
        limit: int = 8,
    ) -> list[Recommendation]:
        """Seeded "for you" list over an already scored batch."""
        discovery = self.system_params.discovery
        return rank_recommendations(
            entities,
            scores,
            seed=seed or daily_seed(),
            noise=discovery.daily_noise,
            min_stars=discovery.recommendation_min_stars,
            limit=limit,
            user_interests=interests,
        )

    # Rendering

    def render_researchers(
        self, researchers: Sequence[Researcher], scores: dict[str, Score], title: str
    ) -> Table:
        table = Table(title=title)
        table.add_column("Rating")
        table.add_column("Name", style="bold")
        table.add_column("Institution")
        table.add_column("Works", justify="right")
        table.add_column("Citations", justify="right")
        table.add_column("Pct", justify="right")
        table.add_column("Confidence")
        table.add_column("Why")

        scored = [(r, scores[r.id]) for r in researchers if r.id in scores]
        for researcher, score in sorted(scored, key=lambda rs: rs[1].raw, reverse=True):
            institution = researcher.last_known_institution
            table.add_row(
                f"{format_stars(score.stars)} {score.stars:.1f}",
                researcher.name or "(unnamed)",
                institution.name if institution else "-",
                str(researcher.total_works),
                str(researcher.citations),
                f"{score.percentile:.0f}",
                score.confidence,
                "; ".join(score.reasons),
            )

        self.console.print(table)
        return table

    def render_professors(
        self, professors: Sequence[Professor], scores: dict[str, Score], title: str
    ) -> Table:
        table = Table(title=title)
        table.add_column("Rating")
        table.add_column("Name", style="bold")
        table.add_column("Faculty")
        table.add_column("Label")
        table.add_column("Confidence")
        table.add_column("Why")

        scored = [(p, scores[p.id]) for p in professors if p.id in scores]
        for professor, score in sorted(scored, key=lambda ps: ps[1].raw, reverse=True):
            table.add_row(
                f"{format_stars(score.stars)} {score.stars:.1f}",
                professor.name,
                professor.faculty or "-",
                score.label,
                score.confidence,
                "; ".join(score.reasons),
            )

        self.console.print(table)
        return table

    def render_recommendations(self, recommendations: Sequence[Recommendation]) -> Table:
        table = Table(title="Recommended for you")
        table.add_column("#", justify="right")
        table.add_column("Name", style="bold")
        table.add_column("Rating")
        table.add_column("Shared interests")

        for position, rec in enumerate(recommendations, start=1):
            table.add_row(
                str(position),
                rec.name,
                f"{format_stars(rec.score.stars)} {rec.score.stars:.1f}",
                ", ".join(rec.matched_interests) or "-",
            )

        self.console.print(table)
        return table


# Command handlers


def cmd_discover(coordinator: CLICoordinator, args: argparse.Namespace) -> int:
    query = DiscoveryQuery(
        city=args.city or "",
        institution=args.institution or "",
        name=args.name or "",
        area=args.area or "",
        active=args.active,
        page=args.page,
    )
    keywords = split_csv(args.keywords) or coordinator.load_profile()["resume_keywords"]

    try:
        result, scores = asyncio.run(coordinator.discover(query, keywords))
    except DiscoveryQueryError as e:
        coordinator.console.print(f"[red]{e}[/red]")
        return 2
    except SourceError as e:
        coordinator.console.print(f"[red]Search failed: {e}[/red]")
        return 1

    if not result.has_results:
        coordinator.console.print("[yellow]No researchers found.[/yellow]")
        if result.suggested_researchers:
            coordinator.console.print("Did you mean:")
            for suggestion in result.suggested_researchers:
                coordinator.console.print(f"  - {suggestion.name}")
        return 0

    coordinator.render_researchers(
        result.researchers,
        scores,
        title=f"Researchers (page {result.page}, {result.matched_institutions} institutions)",
    )
    return 0


def cmd_resume(coordinator: CLICoordinator, args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        coordinator.console.print(f"[red]Input file not found: {input_path}[/red]")
        return 2

    matches = extract_keywords(input_path.read_text(encoding="utf-8"))
    keywords = [m.keyword for m in matches]
    if not keywords:
        coordinator.console.print("[yellow]No research keywords found in resume.[/yellow]")
        return 0

    coordinator.save_profile(resume_keywords=keywords)
    coordinator.console.print(f"Keywords: {', '.join(keywords[: args.search])}")

    researchers, scores = asyncio.run(
        coordinator.discover_from_keywords(keywords[: args.search])
    )
    if not researchers:
        coordinator.console.print("[yellow]No researchers found.[/yellow]")
        return 0

    coordinator.render_researchers(researchers, scores, title="Researchers for your resume")
    recommendations = coordinator.recommend(
        researchers, scores, seed=args.seed, limit=args.limit
    )
    if recommendations:
        coordinator.render_recommendations(recommendations)
    return 0


def cmd_professors(coordinator: CLICoordinator, args: argparse.Namespace) -> int:
    profile = coordinator.load_profile()
    interests = split_csv(args.interests) or profile["interests"]
    keywords = split_csv(args.keywords) or None

    try:
        professors, scores, recommendations = coordinator.rank_professors(
            args.roster, interests, keywords, seed=args.seed, limit=args.limit
        )
    except (FileNotFoundError, ValueError) as e:
        coordinator.console.print(f"[red]{e}[/red]")
        return 2

    if not professors:
        coordinator.console.print("[yellow]No professors match your interests.[/yellow]")
        return 0

    coordinator.render_professors(professors, scores, title="Professors")
    if recommendations:
        coordinator.render_recommendations(recommendations)
    return 0


def cmd_profile(coordinator: CLICoordinator, args: argparse.Namespace) -> int:
    if args.interests is not None:
        coordinator.save_profile(interests=split_csv(args.interests))

    profile = coordinator.load_profile()
    coordinator.console.print(
        f"Interests: {', '.join(profile['interests']) or '-'}\n"
        f"Resume keywords: {', '.join(profile['resume_keywords']) or '-'}"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="researchbridge",
        description="Find and rank researchers and professors to work with",
    )
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--config", help="Path to system_params.json")
    parser.add_argument(
        "--store", default=DEFAULT_STORE, help=f"Profile store (default: {DEFAULT_STORE})"
    )

    subparsers = parser.add_subparsers(dest="command")

    disc = subparsers.add_parser("discover", help="Search OpenAlex researchers and rank them")
    disc.add_argument("--city", help="City to search institutions in")
    disc.add_argument("--institution", help="Institution name")
    disc.add_argument("--name", help="Researcher name")
    disc.add_argument("--area", help="Research area")
    disc.add_argument("--active", action="store_true", help="Only recently active researchers")
    disc.add_argument("--page", type=int, default=1, help="Result page (default 1)")
    disc.add_argument("--keywords", help="Comma-separated keywords for the ranking boost")
    disc.set_defaults(func=cmd_discover)

    res = subparsers.add_parser("resume", help="Extract resume keywords and search by them")
    res.add_argument("--input", required=True, help="Path to resume text")
    res.add_argument("--search", type=int, default=5, help="Keywords to search (default 5)")
    res.add_argument("--seed", help="Recommendation shuffle seed (default: today's date)")
    res.add_argument("--limit", type=int, default=20, help="Recommendations shown (default 20)")
    res.set_defaults(func=cmd_resume)

    prof = subparsers.add_parser("professors", help="Rank roster professors for your interests")
    prof.add_argument("--roster", default=DEFAULT_ROSTER, help=f"Roster JSON (default: {DEFAULT_ROSTER})")
    prof.add_argument("--interests", help="Comma-separated interests (default: saved profile)")
    prof.add_argument("--keywords", help="Comma-separated ranking keywords (default: interests)")
    prof.add_argument("--seed", help="Recommendation shuffle seed (default: today's date)")
    prof.add_argument("--limit", type=int, default=8, help="Recommendations shown (default 8)")
    prof.set_defaults(func=cmd_professors)

    prf = subparsers.add_parser("profile", help="Show or update your saved profile")
    prf.add_argument("--interests", help="Comma-separated interests to save")
    prf.set_defaults(func=cmd_profile)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    system_params = SystemParams.load(args.config)
    configure_logging(log_level=system_params.log_level)

    coordinator = CLICoordinator(
        system_params=system_params, store=JsonFileStore(args.store)
    )
    return args.func(coordinator, args)


if __name__ == "__main__":
    raise SystemExit(main())
