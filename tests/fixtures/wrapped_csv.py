"""Small export files shaped like the real platform downloads."""

ACTIVITIES_CSV = """Activity Type,Date,Title,Distance,Calories,Time,Avg HR,Max HR
Running,2025-01-01 07:00:00,Morning Run,3.10,300,0:28:00,150,170
Running,2025-01-02 07:00:00,Easy Run,3.10,310,0:28:00,148,168
Cycling,2025-01-03 18:00:00,Commute,12.5,450,0:45:00,130,160
Pool Swim,2025-01-06 06:30:00,Laps,1609.34,250,0:35:00,0,0
Strength Training,2025-01-07 19:00:00,Gym,0,200,0:40:00,110,140
"""

ACTIVITIES_FR_CSV = """Type d'activité,Date,Titre,Distance,Calories,Temps
Course à pied,2025-03-03 07:00:00,Footing,"5,0",400,0:30:00
Vélo,2025-03-04 07:00:00,Sortie,"20,5",600,1:00:00
"""

STEPS_WEEKLY_CSV = """Week,Steps
Jan 1 - Jan 7,10000
Jan 8 - Jan 14,14000
"""

STEPS_HEADERLESS_CSV = """Jan 1 - Jan 7,10000,7
Jan 8 - Jan 14,14000,7
"""

STEPS_DAILY_CSV = """Date,Steps
2025-01-01,8000
2025-01-02,12000
2025-01-03,0
"""

SLEEP_CSV = """Date,Avg Score,Avg Duration
Jan 1 - Jan 7,82,7h 33min
Jan 8 - Jan 14,75,6h 50min
Jan 15 - Jan 21,,
"""

SLEEP_HEADERLESS_CSV = """Jan 1 - Jan 7,82,7h 33min,x
Jan 8 - Jan 14,75,6h 50min,y
"""


def activity_rows(*rows):
    """Mapped rows keyed by the canonical column names."""
    return [dict(row) for row in rows]


def run_row(day, distance="3.1", time="0:28:00", activity_type="Running", **extra):
    row = {"Date": day, "Activity Type": activity_type, "Distance": distance, "Time": time}
    row.update(extra)
    return row
