"""
Seed script — registers technicians and a day's worth of jobs for demo purposes.

Usage:
    python -m scripts.seed_jobs                 # today
    python -m scripts.seed_jobs 2026-10-21      # a specific day

This creates:
- 3 technicians (one on leave, so it never shows up as a column)
- 4 scheduled jobs spread over the day, one with only an estimate
- 4 unassigned jobs at different priorities, for the queue and its filters

Run this after `docker compose up` to populate the board with demo data.
"""

import sys
from datetime import date

import httpx

BASE_URL = "http://localhost:8000"


def seed(day: date):
    client = httpx.Client(base_url=BASE_URL, timeout=10.0)

    technicians = [
        {"full_name": "Ana Ruiz", "email": "ana@example.com"},
        {"full_name": "Ben Osei", "email": "ben@example.com"},
        {"full_name": "Cy Park", "email": "cy@example.com", "employment_status": "on_leave"},
    ]

    print(f"Registering {len(technicians)} technicians at {BASE_URL}...\n")
    tech_ids = []
    for tech in technicians:
        resp = client.post("/technicians/", json=tech)
        if resp.status_code == 409:
            print(f"  [exists] {tech['email']}")
            continue
        resp.raise_for_status()
        data = resp.json()
        tech_ids.append(data["id"])
        print(f"  [{data['employment_status']}] {data['full_name']} (id: {data['id'][:8]}...)")

    if len(tech_ids) < 2:
        print("\nTechnicians already seeded, skipping jobs.")
        return

    ana, ben = tech_ids[0], tech_ids[1]

    def at(hh_mm: str) -> str:
        return f"{day.isoformat()}T{hh_mm}:00Z"

    jobs = [
        {
            "job_number": "J-1001", "title": "Replace water heater",
            "customer_name": "Maria Lopez", "customer_zip": "94110",
            "assigned_to": ana, "status": "scheduled", "priority": "high",
            "scheduled_start": at("08:00"), "scheduled_end": at("10:30"),
        },
        {
            "job_number": "J-1002", "title": "AC tune-up",
            "customer_name": "Dev Patel", "customer_zip": "94103",
            "assigned_to": ana, "status": "scheduled",
            "scheduled_start": at("13:00"), "estimated_duration": 45,
        },
        {
            "job_number": "J-1003", "title": "Gas leak inspection",
            "customer_name": "Lena Fischer", "customer_zip": "94117",
            "assigned_to": ben, "status": "in_progress", "priority": "urgent",
            "scheduled_start": at("09:00"), "scheduled_end": at("10:00"),
        },
        {
            "job_number": "J-1004", "title": "Install ceiling fan",
            "customer_name": "Sam Okafor", "customer_zip": "94122",
            "assigned_to": ben, "status": "scheduled", "priority": "low",
            "scheduled_start": at("15:00"), "scheduled_end": at("16:30"),
        },
        {
            "job_number": "J-1005", "title": "Drain cleaning",
            "customer_name": "Rosa Diaz", "customer_zip": "94110",
            "priority": "urgent", "estimated_duration": 60,
        },
        {
            "job_number": "J-1006", "title": "Thermostat replacement",
            "customer_name": "Ken Ito", "customer_zip": "94115",
            "priority": "high", "estimated_duration": 30,
        },
        {
            "job_number": "J-1007", "title": "Annual furnace service",
            "customer_name": "Ada Brown", "customer_zip": "94107",
            "estimated_duration": 90,
        },
        {
            "job_number": "J-1008", "title": "Quote: bathroom remodel",
            "customer_name": "Tom Reyes", "customer_zip": "94131",
            "priority": "low",
        },
    ]

    print(f"\nSubmitting {len(jobs)} jobs for {day.isoformat()}...\n")
    for job in jobs:
        resp = client.post("/jobs/", json=job)
        resp.raise_for_status()
        data = resp.json()
        where = "queue" if data["assigned_to"] is None else data["scheduled_start"]
        print(f"  [{data['status']}] {data['job_number']} {data['title']} → {where}")

    print("\nDone! The board is ready.")
    print(f"Day grid:    curl '{BASE_URL}/scheduler/grid?view=day&day={day.isoformat()}'")
    print(f"Queue:       curl '{BASE_URL}/scheduler/unassigned?priority=urgent'")
    print(f"Load:        curl '{BASE_URL}/scheduler/load?day={day.isoformat()}'")


if __name__ == "__main__":
    seed(date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else date.today())
