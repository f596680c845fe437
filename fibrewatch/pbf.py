"""
Decoder for ArcGIS ``f=pbf`` query responses.

The message classes are built at import time from the FeatureCollection
schema below, so no protoc step is needed. Only the parts of
``esriPBuffer.FeatureCollectionPBuffer`` that fibrewatch reads are declared;
field numbers follow the published schema and everything else in a real
payload (geometry, transforms, spatial reference...) is skipped as unknown.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, text_format
from google.protobuf.message import DecodeError as ProtobufDecodeError

from .errors import DecodeError
from .models import Feature, FeatureCollection, FeatureResult, Field, QueryResult, Value, ValueKind

PACKAGE = "esriPBuffer"
ROOT = f"{PACKAGE}.FeatureCollectionPBuffer"

_SCHEMA = f"""
name: "FeatureCollection.proto"
package: "{PACKAGE}"
syntax: "proto3"
message_type {{
  name: "FeatureCollectionPBuffer"
  field {{ name: "version" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }}
  field {{ name: "queryResult" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
          type_name: ".{ROOT}.QueryResult" }}
  nested_type {{
    name: "Field"
    field {{ name: "name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }}
    field {{ name: "alias" number: 3 label: LABEL_OPTIONAL type: TYPE_STRING }}
  }}
  nested_type {{
    name: "Value"
    field {{ name: "string_value" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING oneof_index: 0 }}
    field {{ name: "float_value" number: 2 label: LABEL_OPTIONAL type: TYPE_FLOAT oneof_index: 0 }}
    field {{ name: "double_value" number: 3 label: LABEL_OPTIONAL type: TYPE_DOUBLE oneof_index: 0 }}
    field {{ name: "sint_value" number: 4 label: LABEL_OPTIONAL type: TYPE_SINT32 oneof_index: 0 }}
    field {{ name: "uint_value" number: 5 label: LABEL_OPTIONAL type: TYPE_UINT32 oneof_index: 0 }}
    field {{ name: "int64_value" number: 6 label: LABEL_OPTIONAL type: TYPE_INT64 oneof_index: 0 }}
    field {{ name: "uint64_value" number: 7 label: LABEL_OPTIONAL type: TYPE_UINT64 oneof_index: 0 }}
    field {{ name: "sint64_value" number: 8 label: LABEL_OPTIONAL type: TYPE_SINT64 oneof_index: 0 }}
    field {{ name: "bool_value" number: 9 label: LABEL_OPTIONAL type: TYPE_BOOL oneof_index: 0 }}
    oneof_decl {{ name: "value_type" }}
  }}
  nested_type {{
    name: "Feature"
    field {{ name: "attributes" number: 1 label: LABEL_REPEATED type: TYPE_MESSAGE
            type_name: ".{ROOT}.Value" }}
  }}
  nested_type {{
    name: "FeatureResult"
    field {{ name: "objectIdFieldName" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }}
    field {{ name: "exceededTransferLimit" number: 9 label: LABEL_OPTIONAL type: TYPE_BOOL }}
    field {{ name: "fields" number: 13 label: LABEL_REPEATED type: TYPE_MESSAGE
            type_name: ".{ROOT}.Field" }}
    field {{ name: "features" number: 15 label: LABEL_REPEATED type: TYPE_MESSAGE
            type_name: ".{ROOT}.Feature" }}
  }}
  nested_type {{
    name: "CountResult"
    field {{ name: "count" number: 1 label: LABEL_OPTIONAL type: TYPE_UINT64 }}
  }}
  nested_type {{
    name: "ObjectIdsResult"
    field {{ name: "objectIdFieldName" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING }}
    field {{ name: "objectIds" number: 3 label: LABEL_REPEATED type: TYPE_UINT64 }}
  }}
  nested_type {{
    name: "QueryResult"
    field {{ name: "featureResult" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE
            type_name: ".{ROOT}.FeatureResult" oneof_index: 0 }}
    field {{ name: "countResult" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
            type_name: ".{ROOT}.CountResult" oneof_index: 0 }}
    field {{ name: "idsResult" number: 3 label: LABEL_OPTIONAL type: TYPE_MESSAGE
            type_name: ".{ROOT}.ObjectIdsResult" oneof_index: 0 }}
    oneof_decl {{ name: "Results" }}
  }}
}}
"""

_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(
    text_format.Parse(_SCHEMA, descriptor_pb2.FileDescriptorProto()).SerializeToString()
)


def _message_class(name: str):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(name))


FeatureCollectionPBuffer = _message_class(ROOT)
ValuePBuffer = _message_class(f"{ROOT}.Value")


def _value(msg) -> Value:
    which = msg.WhichOneof("value_type")
    if which is None:
        return Value()
    return Value(ValueKind(which), getattr(msg, which))


def _feature_result(msg) -> FeatureResult:
    return FeatureResult(
        fields=[Field(name=f.name, alias=f.alias) for f in msg.fields],
        features=[Feature([_value(v) for v in feat.attributes]) for feat in msg.features],
        exceeded_transfer_limit=msg.exceededTransferLimit,
    )


def decode_collection(payload: bytes) -> FeatureCollection:
    """Decode a raw ``f=pbf`` response body.

    Raises:
        DecodeError: if the bytes are not a valid buffer for the schema
    """
    try:
        message = FeatureCollectionPBuffer.FromString(payload)
    except ProtobufDecodeError as e:
        raise DecodeError(f"Malformed FeatureCollection payload: {e}") from e

    if not message.HasField("queryResult"):
        return FeatureCollection(query_result=None, version=message.version)

    query = message.queryResult
    if query.WhichOneof("Results") == "featureResult":
        result = _feature_result(query.featureResult)
    else:
        # count/ids queries carry no feature table
        result = FeatureResult()
    return FeatureCollection(query_result=QueryResult(result), version=message.version)
