import io

from openpyxl import Workbook

from boracle_app import db
from boracle_app.faculty.services import normalize_initial, split_initials, read_csv_rows
from boracle_app.models import Faculty, FacultyInitial

CSV = (
    "facultyName,email,imgURL,initials\n"
    "Dr. Ayesha Karim,ayesha@g.bracu.ac.bd,https://img.example/a.png,\"akm, AYK\"\n"
    "No Email,,,NE\n"
    "Bad Domain,someone@gmail.com,,BD\n"
    "Plain Http,plain@g.bracu.ac.bd,http://img.example/p.png,PH\n"
    "Dup Email,ayesha@g.bracu.ac.bd,,DUP\n"
)


def _seed_faculty(app, name, email, initials):
    with app.app_context():
        fac = Faculty(faculty_name=name, email=email)
        for i in initials:
            fac.initials.append(FacultyInitial(faculty_initial=i))
        db.session.add(fac)
        db.session.commit()
        return fac.faculty_id


def test_normalize_initial():
    assert normalize_initial("  akm ") == "AKM"
    assert normalize_initial("   ") is None
    assert normalize_initial(None) is None
    assert split_initials("abc, XYZ,, abc") == ["ABC", "XYZ"]


def test_read_csv_rows_lowercases_headers():
    headers, rows = read_csv_rows("FacultyName,Email,ImgURL,Initials\n a , b ,,c\n")
    assert headers == ["facultyname", "email", "imgurl", "initials"]
    assert rows == [["a", "b", "", "c"]]


def test_lookup_map_is_keyed_by_normalised_initial(client, app, student):
    _seed_faculty(app, "Dr. Ayesha Karim", "ayesha@g.bracu.ac.bd", ["akm", " AYK ", "  "])

    resp = client.get("/api/faculty/lookup")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    fmap = data["facultyMap"]
    assert set(fmap) == {"AKM", "AYK"}
    assert fmap["AKM"] == fmap["AYK"]
    assert fmap["AKM"]["facultyName"] == "Dr. Ayesha Karim"


def test_faculty_detail(client, app, student):
    faculty_id = _seed_faculty(app, "Dr. Z", "z@g.bracu.ac.bd", ["ZZ", "AA"])
    data = client.get(f"/api/faculty/{faculty_id}").get_json()
    assert data["facultyId"] == faculty_id
    assert data["initials"] == ["AA", "ZZ"]
    assert client.get("/api/faculty/missing").status_code == 404


def test_import_reports_row_errors(admin_client, app):
    resp = admin_client.post("/api/admin/import/faculty", json={"file": CSV})
    assert resp.status_code == 200
    result = resp.get_json()
    assert result["successCount"] == 1
    assert result["errorCount"] == 4
    assert result["totalCount"] == 5
    assert [e["row"] for e in result["errors"]] == [3, 4, 5, 6]
    assert "already exists" in result["errors"][-1]["message"]

    with app.app_context():
        fac = db.session.query(Faculty).one()
        assert sorted(i.faculty_initial for i in fac.initials) == ["AKM", "AYK"]


def test_import_dry_run_writes_nothing(admin_client, app):
    resp = admin_client.post("/api/admin/import/faculty", json={"file": CSV, "dryRun": True})
    assert resp.get_json()["successCount"] == 1
    with app.app_context():
        assert db.session.query(Faculty).count() == 0


def test_import_csv_upload(admin_client, app):
    data = {"file": (io.BytesIO(CSV.encode("utf-8")), "faculty.csv")}
    resp = admin_client.post("/api/admin/import/faculty", data=data, content_type="multipart/form-data")
    assert resp.status_code == 200
    assert resp.get_json()["successCount"] == 1


def test_import_xlsx_upload(admin_client, app):
    wb = Workbook()
    ws = wb.active
    ws.append(["FacultyName", "Email", "ImgURL", "Initials"])
    ws.append(["Dr. Xl", "xl@g.bracu.ac.bd", None, "xl"])
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)

    data = {"file": (buf, "faculty.xlsx")}
    resp = admin_client.post("/api/admin/import/faculty", data=data, content_type="multipart/form-data")
    assert resp.status_code == 200
    assert resp.get_json()["successCount"] == 1
    with app.app_context():
        assert db.session.query(FacultyInitial).one().faculty_initial == "XL"


def test_import_rejects_bad_input(admin_client):
    assert admin_client.post("/api/admin/import/faculty", json={}).status_code == 400
    resp = admin_client.post("/api/admin/import/faculty", json={"file": "name,email\nx,y\n"})
    assert resp.status_code == 400
    assert "Missing required headers" in resp.get_json()["error"]

    data = {"file": (io.BytesIO(b"x"), "faculty.txt")}
    resp = admin_client.post("/api/admin/import/faculty", data=data, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_import_requires_admin(client, student):
    assert client.post("/api/admin/import/faculty", json={"file": CSV}).status_code == 401
