"""End-to-end tests through the HTTP routers."""


class TestAuth:
    async def test_requires_token(self, client):
        response = await client.get("/leaderboard/monthly", params={"period": "2025-01", "category": "ASN"})
        assert response.status_code in (401, 403)

    async def test_peer_cannot_evaluate(self, client, people, auth):
        response = await client.post(
            "/evaluations/unit",
            json={"rated_employee_id": people["budi"].id, "rating_period": "2025-01"},
            headers=auth(people["ani"]),
        )
        assert response.status_code == 403

    async def test_unit_admin_cannot_finalise(self, client, people, auth):
        response = await client.post(
            "/evaluations/final",
            json={"rated_employee_id": people["ani"].id, "rating_period": "2025-01"},
            headers=auth(people["unit_admin"]),
        )
        assert response.status_code == 403


class TestEvaluationFlow:
    async def test_tiers_through_the_api(self, client, people, rate, auth):
        await rate(people["ani"], "2025-01", [60, 40])
        await rate(people["budi"], "2025-01", [97])

        response = await client.post(
            "/evaluations/unit",
            json={
                "rated_employee_id": people["ani"].id,
                "rating_period": "2025-01",
                "has_disciplinary_action": True,
                "disciplinary_action_note": "Written warning",
                "has_poor_attendance": True,
                "has_contribution": True,
                "contribution_description": "Digitised archive",
            },
            headers=auth(people["unit_admin"]),
        )
        assert response.status_code == 200
        assert response.json()["final_total_points"] == 90

        board = await client.get(
            "/leaderboard/monthly",
            params={"period": "2025-01", "category": "ASN"},
            headers=auth(people["ani"]),
        )
        entries = board.json()["entries"]
        assert board.json()["period_label"] == "Januari 2025"
        assert [(e["subject_id"], e["score"], e["source_tier"]) for e in entries] == [
            (people["budi"].id, 97, "peerAverage"),
            (people["ani"].id, 90, "unit"),
        ]
        assert entries[0]["is_leader"] is True

        prefill = await client.get(
            f"/evaluations/final/prefill/{people['ani'].id}/2025-01",
            headers=auth(people["pusat"]),
        )
        assert prefill.json()["source"] == "unit"
        assert prefill.json()["values"]["has_disciplinary_action"] is True

        response = await client.post(
            "/evaluations/final",
            json={
                "rated_employee_id": people["ani"].id,
                "rating_period": "2025-01",
                "additional_adjustment": 5,
                "additional_adjustment_note": "National award",
            },
            headers=auth(people["pusat"]),
        )
        assert response.status_code == 200
        assert response.json()["final_total_points"] == 105

        detail = await client.get(f"/evaluations/{people['ani'].id}/2025-01", headers=auth(people["budi"]))
        body = detail.json()
        assert body["resolved"] == {
            "subject_id": people["ani"].id,
            "period": "2025-01",
            "score": 105,
            "source_tier": "final",
        }
        assert body["unit_evaluation"]["final_total_points"] == 90
        assert body["final_evaluation"]["unit_final_points"] == 90

    async def test_validation_error_shape(self, client, people, rate, auth):
        await rate(people["ani"], "2025-01", [100])
        response = await client.post(
            "/evaluations/unit",
            json={
                "rated_employee_id": people["ani"].id,
                "rating_period": "2025-01",
                "has_disciplinary_action": True,
                "disciplinary_action_note": "",
            },
            headers=auth(people["unit_admin"]),
        )
        assert response.status_code == 422
        assert response.json()["field"] == "disciplinary_action_note"

        detail = await client.get(f"/evaluations/{people['ani'].id}/2025-01", headers=auth(people["ani"]))
        assert detail.json()["unit_evaluation"] is None

    async def test_yearly_leaderboard(self, client, people, rate, auth):
        await rate(people["ani"], "2025-01", [80])
        await rate(people["ani"], "2025-02", [70])
        await rate(people["budi"], "2025-03", [120])
        response = await client.get(
            "/leaderboard/yearly",
            params={"year": "2025", "category": "ASN"},
            headers=auth(people["ani"]),
        )
        entries = response.json()["entries"]
        assert [(e["subject_id"], e["score"]) for e in entries] == [
            (people["ani"].id, 150),
            (people["budi"].id, 120),
        ]
        assert entries[0]["periods"] == ["2025-01", "2025-02"]

    async def test_unknown_category(self, client, people, auth):
        response = await client.get(
            "/leaderboard/monthly",
            params={"period": "2025-01", "category": "Honorer"},
            headers=auth(people["ani"]),
        )
        assert response.status_code == 422
        assert response.json()["field"] == "category"


class TestWinnersApi:
    async def test_designate_replace_revoke(self, client, people, auth):
        admin = auth(people["pusat"])
        first = await client.post("/winners", json={
            "winner_type": "monthly",
            "employee_category": "ASN",
            "period": "2025-01",
            "employee_id": people["ani"].id,
            "final_points": 105,
        }, headers=admin)
        assert first.status_code == 200

        second = await client.post("/winners", json={
            "winner_type": "monthly",
            "employee_category": "ASN",
            "period": "2025-01",
            "employee_id": people["budi"].id,
            "final_points": 98,
        }, headers=admin)
        assert second.json()["id"] == first.json()["id"]

        listed = await client.get("/winners", params={"year": "2025"}, headers=admin)
        assert [w["employee_id"] for w in listed.json()] == [people["budi"].id]

        recap = await client.get("/winners/recap", params={"year": "2025"}, headers=admin)
        assert recap.json()["yearly_candidates"]["ASN"][0]["employee_id"] == people["budi"].id

        revoked = await client.delete(f"/winners/{second.json()['id']}", headers=admin)
        assert revoked.status_code == 200
        missing = await client.delete(f"/winners/{second.json()['id']}", headers=admin)
        assert missing.status_code == 404

    async def test_peer_cannot_designate(self, client, people, auth):
        response = await client.post("/winners", json={
            "winner_type": "monthly",
            "employee_category": "ASN",
            "period": "2025-01",
            "employee_id": people["ani"].id,
            "final_points": 105,
        }, headers=auth(people["ani"]))
        assert response.status_code == 403

    async def test_padded_period_rejected(self, client, people, auth):
        response = await client.post("/winners", json={
            "winner_type": "monthly",
            "employee_category": "ASN",
            "period": "2025-01\n",
            "employee_id": people["ani"].id,
            "final_points": 105,
        }, headers=auth(people["pusat"]))
        assert response.status_code == 422
        assert response.json()["field"] == "period"


class TestPeriodsApi:
    async def test_settings_and_status(self, client, people, auth):
        response = await client.put("/periods/2025-03", json={
            "rating_start_date": "2025-03-01",
            "rating_end_date": "2025-03-25",
            "evaluation_start_date": "2025-03-01",
            "evaluation_end_date": "2025-03-25",
            "verification_start_date": "2025-03-01",
            "verification_end_date": "2025-03-25",
        }, headers=auth(people["pusat"]))
        assert response.status_code == 200

        status = await client.get("/periods/2025-03/status", headers=auth(people["ani"]))
        assert status.json()["period_label"] == "Maret 2025"
        assert status.json()["phase"] == "completed"

    async def test_status_without_settings(self, client, people, auth):
        status = await client.get("/periods/2025-04/status", headers=auth(people["ani"]))
        assert status.json()["phase"] == "no_settings"

    async def test_unit_participation(self, client, people, rate, auth):
        admin = auth(people["pusat"])
        response = await client.put("/periods/units/1", json={"is_active": True}, headers=admin)
        assert response.status_code == 200
        assert response.json()["is_active"] is True

        status = await client.get(
            "/periods/2025-03/status", params={"work_unit_id": 2}, headers=auth(people["dedi"])
        )
        assert status.json()["unit_participating"] is False

        await rate(people["budi"], "2025-03", [90], rater=people["ani"])
        completion = await client.get("/periods/2025-03/completion", headers=admin)
        units = completion.json()
        assert [u["work_unit_id"] for u in units] == [1]
        assert units[0]["total_employees"] == 3
        assert units[0]["rated_count"] == 1

        forbidden = await client.get("/periods/units", headers=auth(people["ani"]))
        assert forbidden.status_code == 403

