import pytest

from lexicard.domain.errors import CardNotFoundError, ConcurrentUpdateError, DuplicateCardError
from lexicard.infrastructure.adapters import InMemoryCardRepository


@pytest.mark.asyncio
async def test_add_load_list(make_card):
    repo = InMemoryCardRepository()
    a = await repo.add(make_card(deck_id="german"))
    b = await repo.add(make_card(deck_id="french"))

    assert await repo.load(a.id) == a
    assert await repo.list_cards() == [a, b]
    assert await repo.list_cards("french") == [b]


@pytest.mark.asyncio
async def test_save_bumps_version(make_card):
    card = make_card()
    repo = InMemoryCardRepository([card])

    saved = await repo.save(card)
    assert saved.version == 1

    saved_again = await repo.save(saved)
    assert saved_again.version == 2


@pytest.mark.asyncio
async def test_stale_save_rejected(make_card):
    card = make_card()
    repo = InMemoryCardRepository([card])
    await repo.save(card)

    with pytest.raises(ConcurrentUpdateError) as exc:
        await repo.save(card)
    assert exc.value.expected == 0
    assert exc.value.actual == 1


@pytest.mark.asyncio
async def test_missing_and_duplicate(make_card):
    card = make_card()
    repo = InMemoryCardRepository([card])

    with pytest.raises(CardNotFoundError):
        await repo.load("card_missing")
    with pytest.raises(CardNotFoundError):
        await repo.save(make_card(id="card_missing"))
    with pytest.raises(DuplicateCardError):
        await repo.add(card)


@pytest.mark.asyncio
async def test_delete(make_card):
    card = make_card()
    repo = InMemoryCardRepository([card])

    await repo.delete(card.id)

    assert await repo.list_cards() == []
    with pytest.raises(CardNotFoundError):
        await repo.delete(card.id)
