from apkdl.models.build import BuildRun, recover_branch
from apkdl.models.release import ApkFile, NO_DESCRIPTION, Release, strip_tag_prefix

from conftest import make_asset, make_release, make_run


def test_strip_tag_prefix_removes_prefix_once():
    assert strip_tag_prefix("apk-main", "apk-") == "main"
    assert strip_tag_prefix("apk-apk-main", "apk-") == "apk-main"
    assert strip_tag_prefix("feature-apk-x", "apk-") == "feature-apk-x"


def test_release_keeps_only_matching_artifacts():
    data = make_release(
        "apk-feature/login",
        assets=[
            make_asset("app-feature-abc1234-20240101-120000.apk"),
            make_asset("mapping.txt"),
            make_asset("app.apk.sha256"),
        ],
    )

    release = Release.from_api_response(data, "apk-", ".apk")

    assert release.branch == "feature/login"
    assert [a.name for a in release.apk_files] == ["app-feature-abc1234-20240101-120000.apk"]
    assert release.author == "octocat"


def test_release_falls_back_to_tag_and_placeholder_description():
    data = make_release("apk-main", name="", body=None)

    release = Release.from_api_response(data, "apk-")

    assert release.name == "apk-main"
    assert release.description == NO_DESCRIPTION


def test_release_to_dict_uses_frontend_field_names():
    data = make_release("apk-main", assets=[make_asset("app-20240101-120000.apk")])

    out = Release.from_api_response(data, "apk-").to_dict()

    assert set(out) == {
        "id", "name", "tag", "branch", "description", "publishedAt", "author", "apkFiles",
    }
    apk = out["apkFiles"][0]
    assert apk["downloadUrl"].endswith("app-20240101-120000.apk")
    assert apk["downloadCount"] == 3
    assert apk["uploadedAt"] == "2024-01-01T10:00:00Z"


def test_apk_file_omits_missing_upload_time():
    apk = ApkFile(name="a.apk", size=1, download_url="https://x/a.apk")
    assert "uploadedAt" not in apk.to_dict()


def test_apk_file_upload_time_prefers_created_at():
    assert ApkFile.from_api_response(make_asset("a.apk")).uploaded_at == "2024-01-01T10:00:00Z"

    replaced = make_asset("a.apk", created_at=None)
    assert ApkFile.from_api_response(replaced).uploaded_at == "2024-01-01T10:05:00Z"


def test_recover_branch_from_title():
    assert recover_branch("APK Build from branch: feature/x", "main") == "feature/x"
    assert recover_branch("APK Build from branch:   fix/crash  ", "main") == "fix/crash"


def test_recover_branch_falls_back_to_head_branch():
    assert recover_branch("Fix login screen", "develop") == "develop"
    assert recover_branch(None, "develop") == "develop"
    assert recover_branch("APK Build from branch: ", "develop") == "develop"


def test_build_run_duration_only_when_completed():
    running = BuildRun.from_api_response(make_run(1))
    assert running.completed_at is None
    assert running.duration is None

    finished = BuildRun.from_api_response(
        make_run(2, status="completed", conclusion="success")
    )
    assert finished.completed_at == "2024-01-02T09:10:00Z"
    assert finished.duration == 600
    assert finished.conclusion == "success"


def test_build_run_maps_fields():
    run = BuildRun.from_api_response(
        make_run(3, display_title="APK Build from branch: feature/x", head_branch="main")
    )

    assert run.branch == "feature/x"
    assert run.commit_message == "APK Build from branch: feature/x"
    assert run.author == "octocat"
    assert run.url.endswith("/runs/3")


def test_build_run_dict_round_trip_keeps_optional_fields():
    run = BuildRun.from_api_response(make_run(4, status="completed", conclusion="failure"))
    assert BuildRun.from_dict(run.to_dict()) == run
