import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from photo_sequence.config import EncodingSettings, Settings, load_config  # noqa: E402


def test_missing_file_and_empty_env_gives_defaults(tmp_path):
    settings = load_config(tmp_path / "missing.json", env={})

    assert settings == Settings()
    assert settings.default_width == 1280
    assert settings.frame_duration == 3.0
    assert settings.music_volume == 0.5
    assert settings.encoding == EncodingSettings()


def test_json_file_overrides(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "work_dir": "renders",
                "ffmpeg_binary": "/usr/local/bin/ffmpeg",
                "ffmpeg_timeout_seconds": 120,
                "frame_duration": 2.5,
                "zoom_effect": False,
                "music_volume": 0.3,
                "isolate_requests": "yes",
                "encoding": {"preset": "slow", "crf": 20},
            }
        ),
        encoding="utf-8",
    )

    settings = load_config(config_path, env={"FFMPEG_BINARY": "ignored"})

    assert settings.work_dir == Path("renders")
    assert settings.ffmpeg_binary == "/usr/local/bin/ffmpeg"
    assert settings.ffmpeg_timeout_seconds == 120.0
    assert settings.frame_duration == 2.5
    assert settings.zoom_effect is False
    assert settings.fade_effect is True
    assert settings.music_volume == 0.3
    assert settings.isolate_requests is True
    assert settings.encoding.preset == "slow"
    assert settings.encoding.crf == 20
    assert settings.encoding.video_codec == "libx264"


def test_env_fallback(tmp_path):
    env = {
        "PHOTO_SEQUENCE_WORK_DIR": "/data/slideshows",
        "FFMPEG_TIMEOUT": "90",
        "FADE_EFFECT": "false",
        "MUSIC_VOLUME": "0.2",
        "AUDIO_CODEC": "libopus",
        "PHOTO_SEQUENCE_LOG_FILE": "logs/run.log",
    }

    settings = load_config(None, env=env)

    assert settings.work_dir == Path("/data/slideshows")
    assert settings.ffmpeg_timeout_seconds == 90.0
    assert settings.fade_effect is False
    assert settings.zoom_effect is True
    assert settings.music_volume == 0.2
    assert settings.encoding.audio_codec == "libopus"
    assert settings.log_file == Path("logs/run.log")


def test_malformed_values_fall_back_to_defaults(tmp_path):
    env = {
        "FRAME_DURATION": "0",
        "MUSIC_VOLUME": "1.7",
        "FFMPEG_TIMEOUT": "soon",
        "DEFAULT_WIDTH": "-5",
        "VIDEO_CRF": "abc",
    }

    settings = load_config(None, env=env)

    assert settings.frame_duration == 3.0
    assert settings.music_volume == 0.5
    assert settings.ffmpeg_timeout_seconds == 600.0
    assert settings.default_width == 1280
    assert settings.encoding.crf == 23
