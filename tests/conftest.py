import pytest

from hsn_lookup import HSNLookup

HSN_CSV = """HSN,Description,Rate
6109,Cotton T-Shirts and vests,5
8517,Mobile phones and smartphones,18
1101,Wheat flour,0
2402,Cigarettes containing tobacco,40
"""


@pytest.fixture
def hsn_csv(tmp_path):
    path = tmp_path / "hsn.csv"
    path.write_text(HSN_CSV, encoding="utf-8")
    return path


@pytest.fixture
def hsn(hsn_csv):
    return HSNLookup(str(hsn_csv))
