"""Tests for series identity resolution.

Each test scripts the operator through FakePrompter and checks both the
returned resolution and what ended up in decision memory.
"""

import pytest

from tests.helpers.fakes import FakeCatalog, FakePrompter
from tests.helpers.library import HALF_MEN
from watchmatch.core.series_resolver import (
    MALFORMED_REASON,
    OPTION_ADD,
    OPTION_CANCEL,
    OPTION_NEW,
    OPTION_SKIP_ITEM,
    OPTION_SKIP_SERIES,
    OPTION_SKIP_SHOW,
    ResolutionStatus,
    SeriesResolver,
    SeriesSource,
)
from watchmatch.errors import CatalogError
from watchmatch.library import LocalLibrary
from watchmatch.memory import DecisionMemory
from watchmatch.metadata.models import CatalogSeries
from watchmatch.models.core import CanonicalSeries


def _resolver(
    memory: DecisionMemory,
    library: LocalLibrary,
    catalog: FakeCatalog | None = None,
    prompter: FakePrompter | None = None,
) -> SeriesResolver:
    return SeriesResolver(
        memory, library, catalog or FakeCatalog(), prompter or FakePrompter()
    )


@pytest.mark.asyncio
async def test_alias_wins_without_prompt_or_catalog(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    memory.save_alias("TAAHM", HALF_MEN)
    catalog, prompter = FakeCatalog(), FakePrompter()

    result = await _resolver(memory, library, catalog, prompter).resolve("TAAHM")

    assert result.status is ResolutionStatus.RESOLVED
    assert result.series == HALF_MEN
    assert result.source is SeriesSource.ALIAS
    assert not result.is_new
    assert prompter.calls == []
    assert catalog.queries == []


@pytest.mark.asyncio
async def test_alias_on_normalized_name(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    memory.save_alias("TAAHM", HALF_MEN)
    result = await _resolver(memory, library).resolve("TAAHM: Season 4")
    assert result.series == HALF_MEN
    assert result.normalized_name == "TAAHM"


@pytest.mark.asyncio
async def test_skip_list_never_touches_catalog(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    memory.mark_skipped("Some Reality Show", "user skip")
    catalog, prompter = FakeCatalog(), FakePrompter()

    result = await _resolver(memory, library, catalog, prompter).resolve(
        "Some Reality Show"
    )

    assert result.status is ResolutionStatus.SKIPPED
    assert result.reason == "skip list"
    assert prompter.calls == []
    assert catalog.queries == []


@pytest.mark.asyncio
async def test_local_exact_match_saves_alias(
    memory: DecisionMemory, library: LocalLibrary, half_men: CanonicalSeries
) -> None:
    prompter = FakePrompter()
    result = await _resolver(memory, library, prompter=prompter).resolve(
        "Two and a Half Men: Season 1"
    )

    assert result.status is ResolutionStatus.RESOLVED
    assert result.series == half_men
    assert result.source is SeriesSource.LOCAL
    assert prompter.calls == []
    assert memory.lookup_alias("Two and a Half Men: Season 1") == half_men


@pytest.mark.asyncio
async def test_fuzzy_local_match_asks_operator(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    galactica = CanonicalSeries(id="501", name="Battlestar Galactica")
    library.save_series(galactica)
    prompter = FakePrompter(["Battlestar Galactica"])

    result = await _resolver(memory, library, prompter=prompter).resolve(
        "Battlestar Galactica Classic Season 1"
    )

    assert result.series == galactica
    assert result.source is SeriesSource.LOCAL_PICK
    question, options = prompter.calls[0]
    assert options == ["Battlestar Galactica", OPTION_NEW, OPTION_SKIP_ITEM]
    assert memory.lookup_alias("Battlestar Galactica Classic Season 1") == galactica


@pytest.mark.asyncio
async def test_fuzzy_local_skip_is_remembered(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    library.save_series(CanonicalSeries(id="501", name="Battlestar Galactica"))
    raw = "Battlestar Galactica Classic Season 1"

    result = await _resolver(
        memory, library, prompter=FakePrompter([OPTION_SKIP_ITEM])
    ).resolve(raw)

    assert result.status is ResolutionStatus.SKIPPED
    assert memory.is_skipped(raw)

    again = await _resolver(memory, library).resolve(raw)
    assert again.reason == "skip list"


@pytest.mark.asyncio
async def test_add_single_catalog_result(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog = FakeCatalog({"Lost": [CatalogSeries(id=4607, name="Lost", year=2004)]})
    prompter = FakePrompter([OPTION_ADD])

    result = await _resolver(memory, library, catalog, prompter).resolve(
        "Lost: Season 1"
    )

    assert result.status is ResolutionStatus.RESOLVED
    assert result.is_new
    assert result.source is SeriesSource.CATALOG
    assert result.series == CanonicalSeries(id="4607", name="Lost")
    assert catalog.queries == ["Lost"]
    assert prompter.calls[0][1] == [OPTION_ADD, OPTION_SKIP_SHOW, OPTION_CANCEL]
    assert memory.lookup_alias("Lost: Season 1") == result.series


@pytest.mark.asyncio
async def test_add_with_several_results_asks_which(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog = FakeCatalog(
        {
            "Doctor Who": [
                CatalogSeries(id=57243, name="Doctor Who", year=2005),
                CatalogSeries(id=121, name="Doctor Who", year=1963),
            ]
        }
    )
    prompter = FakePrompter([OPTION_ADD, "Doctor Who (1963)"])

    result = await _resolver(memory, library, catalog, prompter).resolve(
        "Doctor Who"
    )

    assert result.series == CanonicalSeries(id="121", name="Doctor Who")
    _, options = prompter.calls[1]
    assert set(options[:2]) == {"Doctor Who (2005)", "Doctor Who (1963)"}
    assert options[-1] == OPTION_SKIP_SERIES
    # Same as the canonical name, so no alias is needed.
    assert memory.lookup_alias("Doctor Who") is None


@pytest.mark.asyncio
async def test_duplicate_catalog_labels_are_disambiguated(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog = FakeCatalog(
        {
            "Fargo": [
                CatalogSeries(id=1, name="Fargo"),
                CatalogSeries(id=2, name="Fargo"),
            ]
        }
    )
    prompter = FakePrompter([OPTION_ADD, "Fargo (?) [2]"])

    result = await _resolver(memory, library, catalog, prompter).resolve("Fargo")

    assert result.series is not None
    assert result.series.id == "2"


@pytest.mark.asyncio
async def test_skip_in_catalog_picker_is_remembered(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog = FakeCatalog(
        {"Fargo": [CatalogSeries(id=1, name="Fargo"), CatalogSeries(id=2, name="Far")]}
    )
    prompter = FakePrompter([OPTION_ADD, OPTION_SKIP_SERIES])

    result = await _resolver(memory, library, catalog, prompter).resolve("Fargo")

    assert result.status is ResolutionStatus.SKIPPED
    assert memory.is_skipped("Fargo")


@pytest.mark.asyncio
async def test_filler_word_fallback_query(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog = FakeCatalog(
        {
            "Battlestar Galactica": [
                CatalogSeries(id=501, name="Battlestar Galactica", year=1978)
            ]
        }
    )
    result = await _resolver(
        memory, library, catalog, FakePrompter([OPTION_ADD])
    ).resolve("Battlestar Galactica Classic Season 1")

    assert catalog.queries == [
        "Battlestar Galactica Classic",
        "Battlestar Galactica Classic Season 1",
        "Battlestar Galactica",
    ]
    assert result.series == CanonicalSeries(id="501", name="Battlestar Galactica")


@pytest.mark.asyncio
@pytest.mark.parametrize("answer", [OPTION_CANCEL, None])
async def test_cancel_persists_nothing(
    memory: DecisionMemory, library: LocalLibrary, answer: str | None
) -> None:
    catalog = FakeCatalog()
    result = await _resolver(
        memory, library, catalog, FakePrompter([answer])
    ).resolve("Lost")

    assert result.status is ResolutionStatus.CANCELLED
    assert not memory.is_skipped("Lost")
    assert memory.aliases() == {}
    assert catalog.queries == []


@pytest.mark.asyncio
async def test_skip_show_is_remembered(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    result = await _resolver(
        memory, library, prompter=FakePrompter([OPTION_SKIP_SHOW])
    ).resolve("Some Reality Show", source="netflix")

    assert result.status is ResolutionStatus.SKIPPED
    entry = memory.skip_entry("Some Reality Show")
    assert entry is not None
    assert (entry.reason, entry.source) == ("user skip", "netflix")


@pytest.mark.asyncio
async def test_not_found_is_not_remembered(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    result = await _resolver(
        memory, library, FakeCatalog(), FakePrompter([OPTION_ADD])
    ).resolve("Nowhere Show")

    assert result.status is ResolutionStatus.SKIPPED
    assert result.reason == "not found"
    assert not memory.is_skipped("Nowhere Show")


@pytest.mark.asyncio
async def test_catalog_error_skips_without_remembering(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog = FakeCatalog(error=CatalogError("timeout"))
    result = await _resolver(
        memory, library, catalog, FakePrompter([OPTION_ADD])
    ).resolve("Lost")

    assert result.status is ResolutionStatus.SKIPPED
    assert result.reason == "catalog error"
    assert not memory.is_skipped("Lost")


@pytest.mark.asyncio
async def test_malformed_name_is_skipped_and_remembered(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog, prompter = FakeCatalog(), FakePrompter()
    result = await _resolver(memory, library, catalog, prompter).resolve("???")

    assert result.status is ResolutionStatus.SKIPPED
    assert result.reason == MALFORMED_REASON
    assert memory.is_skipped("???")
    assert prompter.calls == []
    assert catalog.queries == []


@pytest.mark.asyncio
async def test_answer_never_offered_cancels_new_series_prompt(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    catalog = FakeCatalog()
    prompter = FakePrompter(["Maybe later"], verbatim=True)

    result = await _resolver(memory, library, catalog, prompter).resolve("Lost")

    assert result.status is ResolutionStatus.CANCELLED
    assert not memory.is_skipped("Lost")
    assert catalog.queries == []


@pytest.mark.asyncio
async def test_answer_never_offered_cancels_pickers(
    memory: DecisionMemory, library: LocalLibrary
) -> None:
    library.save_series(CanonicalSeries(id="501", name="Battlestar Galactica"))
    fuzzy = await _resolver(
        memory, library, prompter=FakePrompter(["Galactica 1980"], verbatim=True)
    ).resolve("Battlestar Galactica Classic Season 1")
    assert fuzzy.status is ResolutionStatus.CANCELLED

    catalog = FakeCatalog(
        {"Fargo": [CatalogSeries(id=1, name="Fargo"), CatalogSeries(id=2, name="Far")]}
    )
    prompter = FakePrompter([OPTION_ADD, "Fargo (1996)"], verbatim=True)
    picked = await _resolver(memory, library, catalog, prompter).resolve("Fargo")
    assert picked.status is ResolutionStatus.CANCELLED

    assert memory.aliases() == {}
    assert not memory.is_skipped("Fargo")
