"""BaseResponse 模块测试

测试标准化响应的功能
"""

import json
from datetime import datetime

from ycatalog.category import CategoryNode
from ycatalog.response import (
    BaseResponse,
    ItemResponse,
    NotFound,
    OK,
    Resp,
    ResponseStatus,
)


def get_response_content(response) -> dict:
    """从 JSONResponse 中获取内容"""
    return json.loads(response.body.decode())


class TestResponseStatus:
    """ResponseStatus 枚举测试"""

    def test_status_values(self):
        assert ResponseStatus.SUCCESS.value == "success"
        assert ResponseStatus.ERROR.value == "error"

    def test_status_is_string(self):
        assert isinstance(ResponseStatus.SUCCESS, str)


class TestResponses:
    """响应函数测试"""

    def test_ok_with_data(self):
        response = OK(data={"id": 1, "name": "test"})
        content = get_response_content(response)

        assert response.status_code == 200
        assert content == {
            "status": "success",
            "message": "请求成功",
            "msg_details": [],
            "data": {"id": 1, "name": "test"},
        }

    def test_ok_without_data(self):
        assert get_response_content(OK())["data"] == {}

    def test_not_found(self):
        response = NotFound()

        assert response.status_code == 404
        assert get_response_content(response)["message"] == "资源不存在"

    def test_not_found_with_details(self):
        response = NotFound("分类不存在", msg_details=["category_id=c-42"])
        content = get_response_content(response)

        assert content["status"] == "error"
        assert content["msg_details"] == ["category_id=c-42"]

    def test_resp_shortcuts(self):
        assert Resp.OK is not None
        assert get_response_content(Resp.OK(data=[1], message="好"))["message"] == "好"
        assert Resp.NotFound().status_code == 404


class TestSerializeData:
    """数据序列化测试"""

    def test_nested_none_kept(self):
        assert BaseResponse._serialize_data({"a": None}) == {"a": None}

    def test_datetime(self):
        assert BaseResponse._serialize_data(datetime(2024, 1, 2, 3, 4, 5), False) == "2024-01-02 03:04:05"

    def test_schema_objects(self):
        """测试分类节点通过 to_dict 序列化"""
        node = CategoryNode(id="A", name="Shoes", children=[CategoryNode(id="B", name="Boots")])
        data = BaseResponse._serialize_data([node])

        assert data[0]["id"] == "A"
        assert data[0]["children"][0]["name"] == "Boots"
        assert data[0]["urlPath"] == ""

    def test_tuple(self):
        assert BaseResponse._serialize_data((1, 2)) == [1, 2]


class TestItemResponse:

    def test_item_response_model(self):
        item = ItemResponse[dict](data={"id": "A"})

        assert item.status == "success"
        assert item.data == {"id": "A"}
