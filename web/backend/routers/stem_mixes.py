from fastapi import APIRouter, Depends

from soundtrack_player.domain.stem_mixes import StemMixStore

from ..deps import get_stem_mix_store
from ..schemas import SaveStemMixRequest, StemMixInfo

router = APIRouter()


@router.get("/stem-mixes/{track_id}", response_model=list[StemMixInfo])
async def get_stem_mixes(
    track_id: str, store: StemMixStore = Depends(get_stem_mix_store)
):
    """Saved volume presets for a track (empty list when none)."""
    return [StemMixInfo(**mix.to_dict()) for mix in store.get_mixes(track_id)]


@router.post("/stem-mixes/{track_id}", response_model=list[StemMixInfo])
async def save_stem_mix(
    track_id: str,
    request: SaveStemMixRequest,
    store: StemMixStore = Depends(get_stem_mix_store),
):
    """Append a preset; returns every preset for the track."""
    store.save_mix(track_id, request.name, request.stem_volumes)
    return [StemMixInfo(**mix.to_dict()) for mix in store.get_mixes(track_id)]
