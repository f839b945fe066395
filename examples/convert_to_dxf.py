import dxflite


result = dxflite.to_dxf(
    "examples/data/plan.dxf",
    "/tmp/plan_out.dxf",
    types="LINE ARC POLYLINE",
    dxf_version="R2010",
)
print(result)
