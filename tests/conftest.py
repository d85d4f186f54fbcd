"""テスト共通のフィクスチャ"""

from datetime import datetime

import pytest

from club_companion.models import (
    Coordinate,
    CourseData,
    GeofenceZone,
    HoleInfo,
    HoleScore,
    LocalGeofence,
    RoundRecord,
    TeeRating,
)

CLUBHOUSE = Coordinate(lat=46.0700, lng=-64.7300)
HOLE1_TEE = Coordinate(lat=46.0701, lng=-64.7300)
PRACTICE_RANGE = Coordinate(lat=46.0750, lng=-64.7300)
HOLE8_GREEN = Coordinate(lat=46.0677, lng=-64.7266)
FAR_AWAY = Coordinate(lat=46.2000, lng=-64.9000)


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 6, 1, 8, 0, 0)


@pytest.fixture
def clubhouse_zone() -> GeofenceZone:
    return GeofenceZone(
        id="zone-clubhouse",
        zone_name="Clubhouse",
        zone_type="clubhouse",
        latitude=CLUBHOUSE.lat,
        longitude=CLUBHOUSE.lng,
        radius_meters=50,
        trigger_action="check_in",
    )


@pytest.fixture
def hole1_tee_zone() -> GeofenceZone:
    return GeofenceZone(
        id="zone-hole1-tee",
        zone_name="Hole 1 Tee",
        zone_type="hole_tee",
        hole_number=1,
        latitude=HOLE1_TEE.lat,
        longitude=HOLE1_TEE.lng,
        radius_meters=30,
        trigger_action="auto_start",
    )


@pytest.fixture
def range_zone() -> GeofenceZone:
    return GeofenceZone(
        id="zone-range",
        zone_name="Practice Range",
        zone_type="range",
        latitude=PRACTICE_RANGE.lat,
        longitude=PRACTICE_RANGE.lng,
        radius_meters=100,
        trigger_action="tee_alert",
    )


@pytest.fixture
def hole8_green_zone() -> GeofenceZone:
    return GeofenceZone(
        id="zone-hole8-green",
        zone_name="Hole 8 Green",
        zone_type="hole_green",
        hole_number=8,
        latitude=HOLE8_GREEN.lat,
        longitude=HOLE8_GREEN.lng,
        radius_meters=27,
        trigger_action="fnb_prompt",
    )


@pytest.fixture
def remote_zones(
    clubhouse_zone: GeofenceZone,
    hole1_tee_zone: GeofenceZone,
    range_zone: GeofenceZone,
    hole8_green_zone: GeofenceZone,
) -> list[GeofenceZone]:
    return [clubhouse_zone, hole1_tee_zone, range_zone, hole8_green_zone]


@pytest.fixture
def local_course() -> CourseData:
    """座標設定済みのフォールバック用コースデータ(売店のみプレースホルダー)"""
    return CourseData(
        name="Test Golf Club",
        par=72,
        tee_ratings=[
            TeeRating(
                name="White",
                yards=6033,
                mens_rating=69.8,
                mens_slope=127,
                womens_rating=75.4,
                womens_slope=136,
            ),
        ],
        geofences=[
            LocalGeofence(name="Clubhouse", coords=CLUBHOUSE, radius_meters=50),
            LocalGeofence(
                name="Practice Range", coords=PRACTICE_RANGE, radius_meters=100
            ),
            LocalGeofence(
                name="Canteen", coords={"lat": 0, "lng": 0}, radius_meters=30
            ),
        ],
        hole_data=[
            HoleInfo(hole_number=1, par=5, handicap_index=6, tee_box_coords=HOLE1_TEE),
            HoleInfo(
                hole_number=8, par=3, handicap_index=14, green_coords=HOLE8_GREEN
            ),
        ],
    )


@pytest.fixture
def eighteen_hole_scores() -> list[HoleScore]:
    """パー72、グロス90のスコア(3番で9打)"""
    pars = [5, 3, 4, 3, 5, 4, 4, 3, 5, 5, 4, 4, 3, 4, 5, 4, 3, 4]
    strokes = [6, 4, 9, 4, 6, 5, 5, 4, 6, 6, 5, 5, 4, 5, 6, 5, 4, 1]
    return [
        HoleScore(hole=i + 1, par=par, score=score)
        for i, (par, score) in enumerate(zip(pars, strokes, strict=True))
    ]


@pytest.fixture
def sample_round() -> RoundRecord:
    return RoundRecord(
        user_id="user-1",
        tee_played="White",
        gross_score=90,
        adjusted_score=88,
        course_rating=69.8,
        slope_rating=127,
        differential=16.2,
        scores=[HoleScore(hole=1, par=5, score=6, adjusted_score=6)],
        duration_seconds=15300,
        weather_conditions="晴れ",
        played_at=datetime(2025, 5, 10, 9, 30),
    )
