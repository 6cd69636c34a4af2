from edacap_mcp_tools.climate_advisory_tool.forecast_normalizer import (
    has_agronomic_data,
    has_climate_data,
    has_historical_data,
    normalize_agronomic,
    normalize_climate,
    normalize_historical,
)

from tests.fakes import EMPTY_CLIMATE, climate_payload, yield_payload


def test_climate_probabilities_are_relabelled():
    result = normalize_climate(climate_payload("st-1"), "st-1")

    assert result == {
        "station_id": "st-1",
        "forecast_id": "fc-2026",
        "confidence": 0.5,
        "climate_forecasts": [
            {
                "weather_station": "st-1",
                "forecasts": [
                    {
                        "year": 2026,
                        "month": 7,
                        "probabilities": [
                            {"measure": "prec", "below_normal": 0.2, "normal": 0.35, "above_normal": 0.45},
                        ],
                    }
                ],
                "performance": [{"measure": "prec", "value": 0.7}],
            }
        ],
    }


def test_climate_absent_fields_stay_absent():
    payload = {
        "climate": [
            {
                "weather_station": "st-2",
                "data": [{"month": 8, "probabilities": [{"measure": "prec", "upper": 0.5}]}],
            }
        ]
    }

    result = normalize_climate(payload)

    forecast = result["climate_forecasts"][0]
    assert "performance" not in forecast
    assert "forecast_id" not in result
    assert forecast["forecasts"] == [
        {"month": 8, "probabilities": [{"measure": "prec", "above_normal": 0.5}]}
    ]


def test_climate_zero_probability_is_kept():
    payload = {"climate": [{"data": [{"probabilities": [{"measure": "prec", "lower": 0, "normal": 0.0, "upper": 1}]}]}]}
    probability = normalize_climate(payload)["climate_forecasts"][0]["forecasts"][0]["probabilities"][0]
    assert probability == {"measure": "prec", "below_normal": 0, "normal": 0.0, "above_normal": 1}


def test_climate_drops_malformed_records():
    payload = {"climate": ["garbage", {"weather_station": "ok", "data": [None, {"month": 1}]}]}

    result = normalize_climate(payload)

    assert result["climate_forecasts"] == [
        {"weather_station": "ok", "forecasts": [{"month": 1, "probabilities": []}]}
    ]


def test_has_climate_data():
    assert has_climate_data(climate_payload("x"))
    assert not has_climate_data(EMPTY_CLIMATE)
    assert not has_climate_data({})
    assert not has_climate_data(None)
    assert not has_climate_data([])


def test_agronomic_statistics_are_relabelled():
    result = normalize_agronomic(yield_payload("st-1"), "st-1")

    assert result == {
        "station_id": "st-1",
        "crop_forecasts": [
            {
                "weather_station": "st-1",
                "cultivar": "Kuncho",
                "soil": "Vertisol",
                "predictions": [
                    {
                        "measure": "yield_14",
                        "median": 2100.0,
                        "average": 2050.5,
                        "range": {"min": 1200.0, "max": 2900.0},
                        "confidence": {"lower": 1900.0, "upper": 2200.0},
                    }
                ],
            }
        ],
    }


def test_agronomic_absent_fields_stay_absent():
    payload = [{"cultivar": "Kuncho", "data": [{"measure": "yield_14", "median": 1800, "max": 2500}]}]

    prediction = normalize_agronomic(payload)["crop_forecasts"][0]["predictions"][0]

    assert prediction == {"measure": "yield_14", "median": 1800, "range": {"max": 2500}}
    assert "soil" not in normalize_agronomic(payload)["crop_forecasts"][0]


def test_agronomic_nested_yield_shape():
    payload = {
        "forecast": "fc-9",
        "yield": [
            {
                "weather_station": "st-5",
                "yield": [
                    {"cultivar": "Melkassa", "soil": "Nitisol", "start": "2026-06-01", "end": "2026-10-30",
                     "data": [{"measure": "yield_14", "avg": 3000}]},
                ],
            }
        ],
    }

    result = normalize_agronomic(payload, "st-5")

    assert result["forecast_id"] == "fc-9"
    assert result["crop_forecasts"] == [
        {
            "weather_station": "st-5",
            "cultivar": "Melkassa",
            "soil": "Nitisol",
            "start": "2026-06-01",
            "end": "2026-10-30",
            "predictions": [{"measure": "yield_14", "average": 3000}],
        }
    ]
    assert has_agronomic_data(payload)


def test_has_agronomic_data():
    assert has_agronomic_data(yield_payload("x"))
    assert not has_agronomic_data([])
    assert not has_agronomic_data({"yield": []})
    assert not has_agronomic_data({"yield": [{"weather_station": "x", "yield": []}]})


def test_historical_monthly_data_shape():
    payload = [
        {
            "weather_station": "st-1",
            "monthly_data": [
                {"month": 1, "data": [{"measure": "prec", "value": 12.5}, {"measure": "t_max", "value": 24.1}]},
                {"month": 2, "data": [{"measure": "prec", "value": None}]},
            ],
        }
    ]

    result = normalize_historical(payload, "st-1")

    assert result == {
        "station_id": "st-1",
        "climatology": [
            {
                "weather_station": "st-1",
                "months": [
                    {"month": 1, "measures": {"prec": 12.5, "t_max": 24.1}},
                    {"month": 2, "measures": {}},
                ],
            }
        ],
    }


def test_historical_flat_shape_groups_by_station():
    payload = [
        {"weather_station": "st-1", "year": 2020, "month": 1, "data": [{"measure": "prec", "value": 3}]},
        {"weather_station": "st-1", "year": 2020, "month": 2, "data": [{"measure": "prec", "value": 4}]},
    ]

    result = normalize_historical(payload)

    assert result["climatology"] == [
        {
            "weather_station": "st-1",
            "months": [
                {"year": 2020, "month": 1, "measures": {"prec": 3}},
                {"year": 2020, "month": 2, "measures": {"prec": 4}},
            ],
        }
    ]
    assert has_historical_data(payload)
    assert not has_historical_data([])
