"""
/**
 * @file deeplx/tests/test_envelope_service.py
 * @description 上游请求体构造单元测试（时间戳、请求 ID、序列化字节）。
 */
"""

import json
import threading
import unittest
from unittest.mock import patch

from langdetect.lang_detect_exception import LangDetectException

from deeplx.services.envelope_service import (
    RequestIdCounter,
    build_envelope,
    count_i,
    detect_source_lang,
    make_timestamp,
    random_seed_id,
    scrub_surrogates,
    serialize_envelope,
    space_method_field,
)


class TestTimestamp(unittest.TestCase):
    def test_no_i_keeps_raw_time(self):
        self.assertEqual(make_timestamp(0, 1234567), 1234567)

    def test_adjusted_to_multiple_of_count_plus_one(self):
        for now_ms in (1000, 1001, 1002, 1700000000123):
            for c in (1, 2, 3, 7, 12):
                ts = make_timestamp(c, now_ms)
                self.assertEqual(ts % (c + 1), 0)
                self.assertGreater(ts, now_ms)
                self.assertLessEqual(ts, now_ms + c + 1)

    def test_known_values(self):
        self.assertEqual(make_timestamp(2, 1000), 1002)
        self.assertEqual(make_timestamp(3, 1000), 1004)

    def test_count_i(self):
        self.assertEqual(count_i("Hello world"), 0)
        self.assertEqual(count_i("This is it"), 3)
        # only lower-case i counts
        self.assertEqual(count_i("I İ"), 0)

    def test_uses_current_time_when_not_given(self):
        with patch("deeplx.services.envelope_service.time.time", return_value=1000.5):
            self.assertEqual(make_timestamp(0), 1000500)
            self.assertEqual(make_timestamp(1), 1000502)


class TestRequestIdCounter(unittest.TestCase):
    def test_seed_range(self):
        for _ in range(50):
            seed = random_seed_id()
            self.assertEqual(seed % 1000, 0)
            self.assertGreaterEqual(seed, 8300000 * 1000)
            self.assertLess(seed, (8300000 + 99999) * 1000)

    def test_strictly_increasing(self):
        counter = RequestIdCounter(start=41)
        ids = [counter.next() for _ in range(5)]
        self.assertEqual(ids, [42, 43, 44, 45, 46])
        self.assertEqual(counter.current, 46)

    def test_no_duplicates_under_concurrency(self):
        counter = RequestIdCounter(start=0)
        results = []
        lock = threading.Lock()

        def worker():
            local = [counter.next() for _ in range(500)]
            with lock:
                results.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(results), 4000)
        self.assertEqual(len(set(results)), 4000)
        self.assertEqual(sorted(results), list(range(1, 4001)))


class TestSerialization(unittest.TestCase):
    def _envelope(self, request_id):
        return build_envelope("hi", "EN", "DE", request_id=request_id, timestamp=1000)

    def test_spaced_method_bytes(self):
        payload = serialize_envelope(self._envelope(1))
        self.assertEqual(
            payload,
            b'{"jsonrpc":"2.0","method": "LMT_handle_texts","id":1,"params":{"texts":[{"text":"hi",'
            b'"requestAlternatives":3}],"splitting":"newlines","lang":{"source_lang_user_selected":"EN",'
            b'"target_lang":"DE"},"timestamp":1000,"commonJobParams":{"wasSpoken":false,"transcribe_as":""}}}',
        )

    def test_padded_method_bytes(self):
        # (10 + 3) % 13 == 0
        payload = serialize_envelope(self._envelope(10))
        self.assertTrue(payload.startswith(b'{"jsonrpc":"2.0","method" : "LMT_handle_texts","id":10,'))
        # (24 + 5) % 29 == 0
        payload = serialize_envelope(self._envelope(24))
        self.assertIn(b'"method" : "', payload)

    def test_never_compact_method(self):
        for request_id in range(8300000000, 8300000400):
            payload = serialize_envelope(self._envelope(request_id))
            self.assertNotIn(b'"method":"', payload)
            self.assertEqual(json.loads(payload)["method"], "LMT_handle_texts")

    def test_quoted_text_is_left_alone(self):
        envelope = build_envelope('say "method":"x"', "EN", "DE", request_id=1, timestamp=1)
        payload = serialize_envelope(envelope)
        self.assertEqual(json.loads(payload)["params"]["texts"][0]["text"], 'say "method":"x"')

    def test_non_ascii_kept_raw(self):
        envelope = build_envelope("你好", "ZH", "EN", request_id=1, timestamp=1)
        self.assertIn("你好".encode("utf-8"), serialize_envelope(envelope))

    def test_space_method_field_only_touches_method(self):
        self.assertEqual(space_method_field(b'{"id":"x","method":"m"}', 1), b'{"id":"x","method": "m"}')

    def test_lone_surrogate_becomes_replacement_char(self):
        envelope = build_envelope("a\ud800b", "EN", "DE", request_id=1, timestamp=1)
        payload = serialize_envelope(envelope)
        self.assertIn("a\ufffdb".encode("utf-8"), payload)
        self.assertEqual(json.loads(payload)["params"]["texts"][0]["text"], "a\ufffdb")

    def test_scrub_surrogates(self):
        self.assertEqual(scrub_surrogates("x\udfffy"), "x\ufffdy")
        self.assertEqual(scrub_surrogates("ok \U0001F600"), "ok \U0001F600")

    def test_html_and_line_separators_escaped(self):
        text = "a<b>&c\u2028d\u2029"
        payload = serialize_envelope(build_envelope(text, "EN", "DE", request_id=1, timestamp=1))
        self.assertIn(b'"text":"a\\u003cb\\u003e\\u0026c\\u2028d\\u2029"', payload)
        self.assertEqual(json.loads(payload)["params"]["texts"][0]["text"], text)


class TestDetectSourceLang(unittest.TestCase):
    @patch("deeplx.services.envelope_service.detect", return_value="zh-cn")
    def test_regional_code_trimmed(self, _):
        self.assertEqual(detect_source_lang("你好世界"), "ZH")

    @patch("deeplx.services.envelope_service.detect", return_value="fr")
    def test_uppercased(self, _):
        self.assertEqual(detect_source_lang("Bonjour tout le monde"), "FR")

    @patch("deeplx.services.envelope_service.detect", side_effect=LangDetectException(0, "No features in text."))
    def test_undetectable_passes_empty(self, _):
        self.assertEqual(detect_source_lang("1234"), "")


if __name__ == "__main__":
    unittest.main()
