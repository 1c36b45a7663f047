from pathlib import Path
import sys

import pytest
from fastapi import HTTPException

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tafverify.api import debug as debug_module
from tafverify.api import decode as decode_module
from tafverify.api import health as health_module
from tafverify.api import verification as verification_module
from tafverify.config import settings
from tafverify.models import BulletinRequest, DecodeRequest, VerifyRequest, VerificationStatus

METAR_TEXT = (
    "202401111000 METAR VECC 111000Z 19012KT 2000 +TSRA SCT012 FEW025CB OVC080 26/21 Q1006=\n"
    "202401111300 METAR VECC 111300Z 19014KT 6000 NSC 30/22 Q1006=\n"
)
TAF_TEXT = (
    "202401110500 TAF VECC 110500Z 1106/1212 19008KT 3500 HZ SCT018 BKN100\n"
    "TEMPO 1108/1112 2000 TSRA SCT015 FEW025CB OVC090=\n"
)


def test_health_check():
    assert health_module.health_check() == {"status": "ok", "env": settings.tafverify_env}


def test_routes_registered():
    from tafverify.main import app

    paths = {route.path for route in app.routes}
    assert {
        "/healthz",
        "/api/v1/decode/metar",
        "/api/v1/decode/taf",
        "/api/v1/decode/bulletin",
        "/api/v1/verify",
        "/api/v1/stations/{code}",
    } <= paths


@pytest.mark.anyio
async def test_decode_metar_endpoint():
    report = await decode_module.decode_metar_report(
        DecodeRequest(text="METAR VABB 121200Z 27010KT CAVOK 30/24 Q1010=")
    )

    assert report.station == "VABB"
    assert report.cavok


@pytest.mark.anyio
async def test_decode_taf_rejects_text_without_station():
    with pytest.raises(HTTPException) as exc_info:
        await decode_module.decode_taf_report(DecodeRequest(text="TAF 110500Z 1106/1212 19008KT"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail["code"] == "decode_failed"


@pytest.mark.anyio
async def test_oversized_payload_rejected(monkeypatch):
    monkeypatch.setattr(settings, "max_bulletin_chars", 20)

    with pytest.raises(HTTPException) as exc_info:
        await decode_module.decode_metar_report(
            DecodeRequest(text="METAR VABB 121200Z 27010KT CAVOK 30/24 Q1010=")
        )

    assert exc_info.value.status_code == 413
    assert exc_info.value.detail["code"] == "payload_too_large"


@pytest.mark.anyio
async def test_decode_bulletin_endpoint(monkeypatch):
    bulletin = await decode_module.decode_bulletin_text(BulletinRequest(text=METAR_TEXT))

    assert len(bulletin.metars) == 2
    assert bulletin.failures == []

    monkeypatch.setattr(settings, "max_reports_per_request", 1)
    with pytest.raises(HTTPException) as exc_info:
        await decode_module.decode_bulletin_text(BulletinRequest(text=METAR_TEXT))
    assert exc_info.value.detail["code"] == "too_many_reports"


@pytest.mark.anyio
async def test_verify_endpoint():
    response = await verification_module.verify_reports(
        VerifyRequest(metar_text=METAR_TEXT, taf_text=TAF_TEXT)
    )

    assert [r.status for r in response.results][0] == VerificationStatus.VERIFIED
    assert response.summary.count == 2
    assert response.summary.verifiable_count == 2
    assert response.failures == []


@pytest.mark.anyio
async def test_verify_endpoint_requires_observations():
    with pytest.raises(HTTPException) as exc_info:
        await verification_module.verify_reports(
            VerifyRequest(metar_text="nothing to see here", taf_text=TAF_TEXT)
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail["code"] == "no_observations"


@pytest.mark.anyio
async def test_station_lookup():
    info = await verification_module.get_station(code="vecc")

    assert info.code == "VECC"
    assert info.known


@pytest.mark.anyio
async def test_debug_tokens_hidden_unless_enabled(monkeypatch):
    monkeypatch.setattr(settings, "debug_endpoints", False)
    with pytest.raises(HTTPException) as exc_info:
        await debug_module.classify_tokens(DecodeRequest(text="TAF VECC"))
    assert exc_info.value.status_code == 404

    monkeypatch.setattr(settings, "debug_endpoints", True)
    classes = await debug_module.classify_tokens(
        DecodeRequest(text="TAF VECC 110500Z 1106/1212 19008KT TEMPO")
    )
    assert [c.token_class for c in classes] == [
        "unknown",
        "station",
        "time",
        "validity",
        "wind",
        "change",
    ]
