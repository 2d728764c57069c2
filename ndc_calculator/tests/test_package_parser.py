"""Tests for openFDA package record parsing."""

import pytest


class TestPackageSize:
    """Test package size extraction from descriptions."""

    @pytest.mark.parametrize("description, expected", [
        ("30 TABLET in 1 BOTTLE", (30.0, 'tablet')),
        ("100 CAPSULE in 1 BOTTLE", (100.0, 'capsule')),
        ("5 mL in 1 VIAL", (5.0, 'ml')),
        ("87.1 g in 1 PACKAGE", (87.1, 'g')),
    ])
    def test_descriptions(self, description, expected):
        from ndc_calculator.extractors.package_parser import extract_package_size

        assert extract_package_size(description) == expected

    @pytest.mark.parametrize("description", [None, "", "BOTTLE"])
    def test_fallback(self, description):
        from ndc_calculator.extractors.package_parser import extract_package_size

        assert extract_package_size(description) == (1.0, 'unit')


class TestFdaRecord:
    """Test openFDA record mapping."""

    @pytest.fixture
    def fda_record(self):
        return {
            'product_ndc': '0071-0156',
            'brand_name': 'Lipitor',
            'generic_name': 'atorvastatin calcium',
            'dosage_form': 'TABLET, FILM COATED',
            'active_ingredients': [{'name': 'ATORVASTATIN CALCIUM', 'strength': '10 mg/1'}],
            'packaging': [
                {'package_ndc': '0071-0156-23', 'description': '90 TABLET, FILM COATED in 1 BOTTLE'},
                {'package_ndc': '0071-0156-40', 'description': '5000 TABLET, FILM COATED in 1 BOTTLE'},
            ],
            'finished': True,
            'listed': '20231231',
        }

    def test_maps_fields(self, fda_record):
        from ndc_calculator.extractors.package_parser import record_from_fda

        record = record_from_fda(fda_record)

        assert record.ndc == '0071-0156'
        assert record.name == 'Lipitor'
        assert record.dosage_form == 'TABLET, FILM COATED'
        assert record.strength == '10 mg/1'
        assert record.package_size == 90.0
        assert record.unit == 'tablet'
        assert record.is_active
        assert record.listed_date == '20231231'

    def test_generic_name_fallback(self, fda_record):
        from ndc_calculator.extractors.package_parser import record_from_fda

        del fda_record['brand_name']

        assert record_from_fda(fda_record).name == 'atorvastatin calcium'

    def test_excluded_record_inactive(self, fda_record):
        from ndc_calculator.extractors.package_parser import record_from_fda

        fda_record['ndc_exclude_flag'] = 'Y'

        assert not record_from_fda(fda_record).is_active

    def test_unfinished_record_inactive(self, fda_record):
        from ndc_calculator.extractors.package_parser import record_from_fda

        fda_record['finished'] = False

        assert not record_from_fda(fda_record).is_active

    def test_package_description_field(self):
        from ndc_calculator.extractors.package_parser import record_from_fda

        record = record_from_fda({'product_ndc': '1234-5678', 'package_description': '10 mL in 1 VIAL'})

        assert record.package_size == 10.0
        assert record.unit == 'ml'
        assert record.name == 'Unknown Product'
        assert record.dosage_form == 'Unknown'
        assert record.strength == 'Unknown'

    def test_missing_product_ndc(self):
        from ndc_calculator.extractors.package_parser import record_from_fda

        assert record_from_fda({'brand_name': 'Lipitor'}) is None


class TestNdcNormalization:
    """Test NDC code formatting."""

    @pytest.mark.parametrize("code, expected", [
        ("00071015623", ("00071-0156-23", "00071015623")),
        ("0071015623", ("0071-0156-23", "0071015623")),
        ("000710156", ("00071-0156", "000710156")),
        ("0071-0156-23", ("0071-0156-23", "0071015623")),
        (" 0071 0156 ", ("00710156", "00710156")),
    ])
    def test_formats(self, code, expected):
        from ndc_calculator.extractors.package_parser import normalize_ndc

        assert normalize_ndc(code) == expected
