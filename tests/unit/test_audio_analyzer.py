"""Tests for audio sniffing, header parsing and signals."""

import pytest


def _wav(channels=1, sample_rate=16000, bits=16, extra_chunks=b"", payload=1000):
    fmt = (
        (1).to_bytes(2, "little")
        + channels.to_bytes(2, "little")
        + sample_rate.to_bytes(4, "little")
        + (sample_rate * channels * bits // 8).to_bytes(4, "little")
        + (channels * bits // 8).to_bytes(2, "little")
        + bits.to_bytes(2, "little")
    )
    body = b"WAVE" + b"fmt " + len(fmt).to_bytes(4, "little") + fmt + extra_chunks
    body += b"data" + payload.to_bytes(4, "little") + bytes(payload)
    return b"RIFF" + len(body).to_bytes(4, "little") + body


def _list_chunk(text: bytes) -> bytes:
    info = b"INFO" + b"ISFT" + len(text).to_bytes(4, "little") + text
    return b"LIST" + len(info).to_bytes(4, "little") + info


def _id3_mp3(tag_text: bytes, frames=2000):
    size = len(tag_text)
    syncsafe = bytes([(size >> 21) & 0x7F, (size >> 14) & 0x7F, (size >> 7) & 0x7F, size & 0x7F])
    return b"ID3\x04\x00\x00" + syncsafe + tag_text + b"\xff\xfb\x90\x64" + bytes(frames)


def _flac(*comments: bytes):
    streaminfo = bytes(10) + bytes([0x0A, 0xC4, 0x42, 0xF0]) + bytes(20)
    first_flag = 0x00 if comments else 0x80
    data = b"fLaC" + bytes([first_flag]) + len(streaminfo).to_bytes(3, "big") + streaminfo
    for n, comment in enumerate(comments):
        last = 0x80 if n == len(comments) - 1 else 0x00
        data += bytes([last | 4]) + len(comment).to_bytes(3, "big") + comment
    return data + bytes(100)


class TestAudioSniffing:
    def test_known_formats(self):
        from humanmark.core.audio.audio_parser import sniff_audio_format
        from humanmark.models.enums import AudioFormat

        assert sniff_audio_format(_wav()) == AudioFormat.WAV
        assert sniff_audio_format(_id3_mp3(b"")) == AudioFormat.MP3
        assert sniff_audio_format(b"\xff\xfb\x90\x64" + bytes(20)) == AudioFormat.MP3
        assert sniff_audio_format(_flac()) == AudioFormat.FLAC
        assert sniff_audio_format(b"\x00\x00\x00\x20ftypM4A " + bytes(20)) == AudioFormat.M4A

    def test_adts_is_aac_not_mp3(self):
        from humanmark.core.audio.audio_parser import sniff_audio_format
        from humanmark.models.enums import AudioFormat

        assert sniff_audio_format(b"\xff\xf1\x50\x80" + bytes(20)) == AudioFormat.AAC

    def test_ogg_and_opus(self):
        from humanmark.core.audio.audio_parser import sniff_audio_format
        from humanmark.models.enums import AudioFormat

        assert sniff_audio_format(b"OggS" + bytes(24) + b"\x01vorbis" + bytes(20)) == AudioFormat.OGG
        assert sniff_audio_format(b"OggS" + bytes(24) + b"OpusHead" + bytes(20)) == AudioFormat.OPUS

    def test_short_or_unknown(self):
        from humanmark.core.audio.audio_parser import sniff_audio_format
        from humanmark.models.enums import AudioFormat

        assert sniff_audio_format(b"") == AudioFormat.UNKNOWN
        assert sniff_audio_format(b"RIFF") == AudioFormat.UNKNOWN
        assert sniff_audio_format(b"just some text here") == AudioFormat.UNKNOWN


class TestAudioMetadata:
    def test_wav_fmt_chunk(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(_wav(channels=2, sample_rate=44100, bits=24), AudioFormat.WAV)
        assert meta.encoder == "PCM"
        assert (meta.channels, meta.sample_rate, meta.bit_depth) == (2, 44100, 24)
        assert meta.is_ai_marked is False

    def test_wav_list_info_ai_marker(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        data = _wav(extra_chunks=_list_chunk(b"ElevenLabs\x00"))
        meta = extract_metadata(data, AudioFormat.WAV)
        assert meta.is_ai_marked is True

    def test_truncated_wav_is_zero(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(b"RIFF\x00\x00\x00\x00WAVEfmt ", AudioFormat.WAV)
        assert meta.sample_rate == 0
        assert meta.channels == 0

    def test_mp3_id3_and_frame_header(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(_id3_mp3(b"TSSE Lavf LAME3.100 recorded in studio"), AudioFormat.MP3)
        assert meta.has_id3 is True
        assert meta.encoder == "LAME"
        assert meta.has_recording_marker is True
        assert meta.sample_rate == 44100
        assert meta.bitrate == 128
        assert meta.channels == 2

    def test_corrupt_syncsafe_size_ignored(self):
        from humanmark.core.audio.audio_parser import extract_metadata, syncsafe_size
        from humanmark.models.enums import AudioFormat

        assert syncsafe_size(b"\x00\x00\x02\x01") == 257
        assert syncsafe_size(b"\x00\x80\x00\x00") is None

        data = b"ID3\x04\x00\x00\xff\xff\xff\xff" + b"suno" + bytes(100)
        meta = extract_metadata(data, AudioFormat.MP3)
        assert meta.has_id3 is True
        assert meta.is_ai_marked is False

    def test_flac_streaminfo(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(_flac(), AudioFormat.FLAC)
        assert (meta.sample_rate, meta.channels, meta.bit_depth) == (44100, 2, 16)

    def test_flac_vorbis_comment(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(_flac(b"reference libFLAC suno track"), AudioFormat.FLAC)
        assert meta.is_ai_marked is True
        assert meta.encoder == "Suno AI"

    def test_flac_later_comment_keeps_earlier_marker(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(_flac(b"vendor=elevenlabs", b"title=x"), AudioFormat.FLAC)
        assert meta.is_ai_marked is True
        assert meta.encoder == "ElevenLabs"

        meta = extract_metadata(_flac(b"title=x", b"vendor=elevenlabs"), AudioFormat.FLAC)
        assert meta.is_ai_marked is True
        assert meta.encoder == "ElevenLabs"

    def test_wav_keeps_pcm_encoder_with_list_info(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(_wav(extra_chunks=_list_chunk(b"audacity\x00")), AudioFormat.WAV)
        assert meta.encoder == "PCM"
        assert meta.is_ai_marked is False

    def test_mp3_frame_sync_after_long_padding(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        data = bytes(2_000_000) + b"\xff\xfb\x90\x64" + bytes(10)
        meta = extract_metadata(data, AudioFormat.MP3)
        assert (meta.sample_rate, meta.bitrate, meta.channels) == (44100, 128, 2)

    def test_mp3_frame_sync_needs_full_header(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        # Sync at len-5 is the last position that is read.
        meta = extract_metadata(bytes(20) + b"\xff\xfb\x90\x64\x00", AudioFormat.MP3)
        assert meta.sample_rate == 44100
        meta = extract_metadata(bytes(20) + b"\xff\xfb\x90\x64", AudioFormat.MP3)
        assert meta.sample_rate == 0

    def test_ogg_opus_encoder(self):
        from humanmark.core.audio.audio_parser import extract_metadata
        from humanmark.models.enums import AudioFormat

        meta = extract_metadata(b"OggS" + bytes(24) + b"OpusHead" + bytes(20), AudioFormat.OPUS)
        assert meta.format == "opus"
        assert meta.encoder == "Opus"


class TestAudioSignals:
    def test_metadata_signal(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer
        from humanmark.core.audio.audio_parser import AudioMetadata

        assert AudioAnalyzer.metadata_signal(AudioMetadata()) == 0.5
        assert AudioAnalyzer.metadata_signal(AudioMetadata(is_ai_marked=True)) == pytest.approx(0.85)
        assert AudioAnalyzer.metadata_signal(AudioMetadata(is_ai_marked=True, encoder="ElevenLabs")) == 1.0
        human = AudioMetadata(has_recording_marker=True, has_id3=True)
        assert AudioAnalyzer.metadata_signal(human) == pytest.approx(0.2)

    def test_format_signal(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer
        from humanmark.core.audio.audio_parser import AudioMetadata

        assert AudioAnalyzer.format_signal(AudioMetadata(sample_rate=44100, channels=2)) == 0.5
        assert AudioAnalyzer.format_signal(AudioMetadata(sample_rate=16000, channels=1)) == pytest.approx(0.6)
        hires = AudioMetadata(sample_rate=96000, bit_depth=24, channels=2)
        assert AudioAnalyzer.format_signal(hires) == pytest.approx(0.6)

    def test_quality_small_file(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer
        from humanmark.core.audio.audio_parser import AudioMetadata

        assert AudioAnalyzer.quality(AudioMetadata(file_size=500)) == pytest.approx(0.7)
        assert AudioAnalyzer.quality(AudioMetadata(file_size=50000, bitrate=192)) == 0.5

    def test_ai_signatures(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer
        from humanmark.core.audio.audio_parser import AudioMetadata

        assert AudioAnalyzer.ai_signatures(b"Text-To-Speech output", AudioMetadata()) == pytest.approx(0.3)
        marked = AudioMetadata(is_ai_marked=True)
        assert AudioAnalyzer.ai_signatures(b"made with suno", marked) == pytest.approx(0.7)
        assert AudioAnalyzer.ai_signatures(b"plain", AudioMetadata()) == 0.0

    def test_small_inputs_neutral(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer

        assert AudioAnalyzer.pattern(b"abc") == 0.5
        assert AudioAnalyzer.noise(b"abc") == 0.5

    def test_repeating_noise_floor(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer

        assert AudioAnalyzer.noise(bytes(20000)) == 0.7

    def test_analyze_wav(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer
        from humanmark.core.fusion.weights import AUDIO_WEIGHTS

        result = AudioAnalyzer().analyze(_wav(extra_chunks=_list_chunk(b"ElevenLabs\x00")))
        assert set(result.signals) == set(AUDIO_WEIGHTS)
        assert result.details["format"] == "wav"
        assert result.stats["sample_rate"] == 16000
        assert result.ai_score > 0.5

    def test_analyze_garbage_does_not_raise(self):
        from humanmark.core.audio.audio_analyzer import AudioAnalyzer

        result = AudioAnalyzer().analyze(b"\x00")
        assert result.details["format"] == "unknown"
        assert 0.0 <= result.ai_score <= 1.0
