"""
Bundled sample programs.

``mdsl test`` runs every sample through lexing, parsing, lowering and
validation; each must come through with zero validation errors.
"""

UNIT_SAMPLE = """\
// Structural schema for the outlet table
UNIT MediaOutlet {
    id: ID PRIMARY KEY,
    name: TEXT(120),
    sector: NUMBER,
    kind: CATEGORY("Daily", "Weekly"),
    is_digital: BOOLEAN,
}
"""

VOCABULARY_SAMPLE = """\
VOCABULARY MediaTypes {
    TYPES {
        1: "Print",
        "online": "Online",
    }
}

SECTOR {
    1: "Daily newspaper",
    2: "Weekly magazine",
}
"""

FAMILY_SAMPLE = """\
IMPORT "shared/units.mdsl";
LET default_language = "de";

TEMPLATE OUTLET "AustrianNewspaper" {
    characteristics {
        language = $default_language;
        sector = "Daily newspaper";
    };
};

FAMILY "Kronen Zeitung Family" {
    @comment "Austria's largest daily";

    OUTLET "Kronen Zeitung" EXTENDS TEMPLATE "AustrianNewspaper" {
        identity {
            id = 200001;
            title = "Kronen Zeitung";
        };
        lifecycle {
            status "active" FROM "1959-01-01" TO CURRENT {
                precision_start = "known";
            };
        };
        characteristics {
            distribution = "national";
        };
        metadata {
            verified = true;
        };
    };

    OUTLET "Krone Bunt" BASED_ON 200001 {
        identity {
            id = 200002;
            title = "Krone Bunt";
        };
        characteristics {
            distribution = "national";
        };
    };

    DATA FOR 200001 {
        @maps_to "MarketData";
        YEAR 2023 {
            METRICS {
                circulation = { value = 500000; unit = "copies"; source = "official"; };
                reach_national = { value = 15.5; unit = "percent"; source = "survey"; };
            };
        };
    };

    DIACHRONIC_LINK offshoot_1972 {
        predecessor = 200001;
        successor = 200002;
        event_date = "1972-01-01" TO "1972-12-31";
        relationship_type = "offshoot";
        @maps_to "18_offshoot";
    };

    SYNCHRONOUS_LINK supplement {
        outlet_1 = { id = 200001; role = "main"; };
        outlet_2 = { id = 200002; role = "supplement"; };
        relationship_type = "main_media_outlet";
        period_start = "1972-01-01";
        period_end = CURRENT;
    };
};
"""

EVENT_SAMPLE = """\
FAMILY "Kurier" {
    OUTLET "Kurier" {
        identity { id = 300001; title = "Kurier"; };
        characteristics { language = "de"; };
    };
};

EVENT mediaprint_founding {
    type = "joint_venture";
    date = "1988-01-01";
    status = "completed";
    entities = {
        kurier = { id = 300001; role = "partner"; stake_before = 100; stake_after = 50; };
    };
    impact = { shared_printing = true; };
};
"""

SAMPLES: dict[str, str] = {
    "unit": UNIT_SAMPLE,
    "vocabulary": VOCABULARY_SAMPLE,
    "family": FAMILY_SAMPLE,
    "event": EVENT_SAMPLE,
}
