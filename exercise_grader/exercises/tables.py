"""
Exercise Tables - Static configuration for built-in exercises

Each table has the same keys as an exercise JSON file and is turned into
an ExerciseConfig by exercise_from_dict().
"""

# ==================== ETO 2025-01-16 ====================
# ICS-205 radio plan, Winter Field Day 2025

ETO_2025_01_16 = {
    'name': 'eto-2025-01-16',
    'description': 'ICS-205 Radio Communications Plan for Winter Field Day 2025',
    'message_type': 'ics_205',
    'window_open': '2025-01-16 00:00',
    'window_close': '2025-01-17 08:00',
    'window_disqualifying': False,
    'require_location': True,
    'base_points': 0,
    'specs': [
        {
            'id': 'organization',
            'label': 'Agency/Group Name',
            'kind': 'EQUALS',
            'expected': 'EmComm Training Organization',
            'points': 20,
        },
        {
            'id': 'incident_name',
            'label': 'Incident Name',
            'kind': 'EQUALS_IGNORE_CASE',
            'expected': 'Winter Field Day 2025',
            'points': 20,
        },
        {
            'id': 'date_time_prepared',
            'label': 'Date/Time Prepared',
            'kind': 'DATE_TIME_ON_OR_AFTER',
            'expected': '2025-01-16 00:00',
            'points': 15,
        },
        {
            'id': 'op_period_to',
            'label': 'Operational Period To',
            'kind': 'DATE_TIME',
            'points': 10,
        },
        {
            'id': 'iap_page',
            'label': 'IAP Page',
            'kind': 'EQUALS',
            'expected': '5',
            'points': 15,
        },
        {
            'id': 'prepared_by',
            'label': 'Prepared By',
            'kind': 'REQUIRED_NOT',
            'expected': 'Name/Title/Signature',
            'points': 20,
        },
        {
            'id': 'special_instructions',
            'label': 'Special Instructions',
            'kind': 'OPTIONAL_NOT',
            'expected': 'N/A',
        },
    ],
    'counters': ['organization', 'iap_page'],
    'feedback_subject': 'ETO Exercise Feedback, 2025-01-16',
}


# ==================== ETO SPRING PRECHECK ====================
# Local weather report, compared with the published city roster

ETO_SPRING_PRECHECK = {
    'name': 'eto-spring-precheck',
    'description': 'Local WX report checked against the city roster spreadsheet',
    'message_type': 'wx_local',
    'require_location': True,
    'base_points': 0,
    'ground_truth': {
        'path': None,
        'key_column': 0,
        'skip_lines': 2,
        'key_source': 'city',
    },
    'specs': [
        {
            'id': 'is_exercise',
            'label': 'THIS IS AN EXERCISE',
            'kind': 'SPECIFIED',
            'expected': 'true',
            'points': 20,
            'importance': 1,
        },
        {
            'id': 'city',
            'label': 'City',
            'kind': 'REQUIRED',
            'points': 20,
        },
        {
            'id': 'state',
            'label': 'State',
            'kind': 'EQUALS_IGNORE_CASE',
            'expected_column': 1,
            'points': 20,
        },
        {
            'id': 'organization',
            'label': 'Organization',
            'kind': 'ALPHANUMERIC',
            'expected_column': 2,
            'points': 20,
        },
        {
            'id': 'temperature',
            'label': 'Temperature',
            'kind': 'REQUIRED',
            'points': 20,
        },
    ],
    'counters': ['state', 'city'],
    'feedback_subject': 'ETO Spring Precheck Feedback',
}


# ==================== ETO 2022-12-08 P2P ====================
# Field situation reports sent directly to target stations

ETO_2022_12_08_P2P = {
    'name': 'eto-2022-12-08-p2p',
    'description': 'Field Situation Report sent peer-to-peer to a target station',
    'message_type': 'field_situation',
    'window_open': '2022-12-08 00:00',
    'window_close': '2022-12-10 08:00',
    'window_disqualifying': True,
    'require_location': True,
    'base_points': 40,
    'specs': [
        {
            'id': 'organization',
            'label': 'Organization',
            'kind': 'ALPHANUMERIC',
            'expected': 'ETO',
            'points': 20,
        },
        {
            'id': 'precedence',
            'label': 'Precedence',
            'kind': 'SET_MEMBERSHIP',
            'choices': ['R/ Routine', 'P/ Priority', 'O/ Immediate', 'Z/ Flash'],
            'points': 20,
        },
        {
            'id': 'task',
            'label': 'Task',
            'kind': 'EQUALS',
            'expected': '12-08',
            'points': 20,
        },
    ],
    'counters': ['precedence', 'to'],
    'feedback_subject': 'ETO P2P Exercise Feedback',
}
