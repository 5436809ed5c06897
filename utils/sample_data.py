# utils/sample_data.py
# A small bespoke sheet for demo mode. Blank Date / Lift Type cells repeat the row above,
# and only the goal row fills in the Goal column.

SAMPLE_GRID = [
    ["Date", "Lift Type", "Reps", "Weight", "Notes", "URL", "Goal"],
    ["2024-01-01", "Back Squat", "5", "225lb", "", ""],
    ["", "", "5", "225lb", "", ""],
    ["", "Bench Press", "5", "165lb", "", ""],
    ["2024-01-03", "Deadlift", "5", "275lb", "", ""],
    ["", "Strict Press", "5", "105lb", "", ""],
    ["2024-01-05", "Back Squat", "3", "245lb", "", ""],
    ["", "Bench Press", "3", "175lb", "", ""],
    ["2024-01-08", "Deadlift", "3", "295lb", "", ""],
    ["", "Strict Press", "3", "115lb", "", ""],
    ["2024-01-10", "Back Squat", "1", "275lb", "Belt", ""],
    ["", "Bench Press", "1", "195lb", "", ""],
    ["2024-01-12", "Deadlift", "1", "335lb", "", ""],
    ["2024-01-15", "Back Squat", "5", "230lb", "", ""],
    ["", "Strict Press", "1", "130lb", "", ""],
    ["2024-01-17", "Bench Press", "5", "170lb", "", ""],
    ["2024-01-19", "Deadlift", "5", "285lb", "", ""],
    ["2024-01-22", "Back Squat", "3", "250lb", "", ""],
    ["2024-01-24", "Bench Press", "3", "180lb", "", ""],
    ["2024-01-26", "Deadlift", "3", "305lb", "", ""],
    ["2024-01-29", "Back Squat", "1", "285lb", "New PR", ""],
    ["", "Bench Press", "1", "200lb", "", ""],
    ["2024-01-31", "Deadlift", "1", "345lb", "", ""],
    ["2024-02-02", "Strict Press", "5", "110lb", "", ""],
    ["2024-12-31", "Back Squat", "1", "315lb", "End of year goal", "", "TRUE"],
]
