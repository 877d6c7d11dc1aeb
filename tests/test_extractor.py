import pytest

from conftest import (
    DECIPHER_CALL, EXPECTED_DECIPHER, EXPECTED_N, HELPER_TABLE, N_CALL, PLAYER_JS,
)
from playersig.base import FragmentPair
from playersig.errors import UnbalancedInputError
from playersig.extractor import between, extract_fragments, extract_functions


def test_between():
    assert between("xx[abc]yy", "[", "]") == "abc"
    assert between("xx[abc", "[", "]") == ""
    assert between("xxabc]", "[", "]") == ""


def test_extracts_both_functions():
    functions = extract_functions(PLAYER_JS)
    assert functions == [EXPECTED_DECIPHER, EXPECTED_N]


def test_fragment_pair_slots():
    pair = extract_fragments(PLAYER_JS)
    assert pair.decipher == EXPECTED_DECIPHER
    assert pair.n_transform == EXPECTED_N
    assert not pair.is_empty


def test_no_anchors_yields_nothing():
    body = PLAYER_JS.replace(DECIPHER_CALL, "").replace(N_CALL, "")
    assert extract_functions(body) == []
    assert extract_fragments(body).is_empty


def test_only_n_transform_keeps_its_slot():
    body = PLAYER_JS.replace(DECIPHER_CALL, "")
    pair = extract_fragments(body)
    assert pair.decipher is None
    assert pair.n_transform == EXPECTED_N
    assert extract_functions(body) == [EXPECTED_N]


def test_only_decipher():
    body = PLAYER_JS.replace(N_CALL, "")
    assert extract_functions(body) == [EXPECTED_DECIPHER]


def test_decipher_without_helper_table():
    body = PLAYER_JS.replace(HELPER_TABLE, "")
    pair = extract_fragments(body)
    assert pair.decipher == ";" + EXPECTED_DECIPHER[len(HELPER_TABLE):]


def test_name_found_but_definition_missing():
    body = PLAYER_JS.replace("var Kq=function(a)", "var Kq=function(b)")
    assert extract_fragments(body).decipher is None


def test_indexed_n_function_name():
    body = (PLAYER_JS
            .replace("var Wb=[Nz];", "var Wb=[Aa, Nz];")
            .replace("(b=Wb[0](b)", "(b=Wb[1](b)"))
    assert extract_fragments(body).n_transform == EXPECTED_N


def test_index_out_of_range():
    body = PLAYER_JS.replace("(b=Wb[0](b)", "(b=Wb[3](b)")
    assert extract_fragments(body).n_transform is None


def test_truncated_definition_raises():
    body = DECIPHER_CALL + 'var Kq=function(a){a=a.split(""'
    with pytest.raises(UnbalancedInputError):
        extract_functions(body)


def test_pair_from_list_matches_slots():
    assert FragmentPair.from_list(extract_functions(PLAYER_JS)) == extract_fragments(PLAYER_JS)
    assert FragmentPair.from_list([]).is_empty


def test_definition_name_is_not_matched_inside_longer_name():
    body = PLAYER_JS.replace("var Kq=", 'var aKq=function(a){return "x"};var Kq=')
    assert extract_fragments(body).decipher == EXPECTED_DECIPHER
