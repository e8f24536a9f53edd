"""
Shared export samples for the parser tests.
"""

import pytest


SAMPLE_L5K = """(*********************************************

  Import-Export
  Version   := RSLogix 5000 v32.00
  Owner     := Plant Engineering
  Exported  := Mon Jan 01 12:00:00 2024

*********************************************)
IE_VER := 2.24;

CONTROLLER PlantCtrl (ProcessorType := "1756-L83E",
                      Major := 32,
                      Minor := 11,
                      Description := "Plant controller")
	DATATYPE MotorData (FamilyType := NoFamily,
	                    Description := "Motor record")
		DINT Speed (Radix := Decimal);
		REAL Setpoints[4] (Radix := Float);
		SINT ZZZZZZZZZZMotorData0 (Hidden := 1);
		BIT Running ZZZZZZZZZZMotorData0 : 0 (Radix := Decimal);
	END_DATATYPE

	DATATYPE EmptyType (FamilyType := NoFamily)
	END_DATATYPE

	MODULE Local (Parent := "Local",
	              CatalogNumber := "1756-L83E",
	              Slot := 0)
	END_MODULE

	MODULE DI_Card (Parent := "Local",
	                CatalogNumber := "1756-IB16",
	                Slot := 1)
		CONNECTION StandardInput (Rate := 20000,
		                          EventID := 0)
		END_CONNECTION
	END_MODULE

	ADD_ON_INSTRUCTION_DEFINITION ScaleValue (Description := "Scale a value",
	                                          Revision := "1.0",
	                                          Vendor := "Acme",
	                                          ExecutePrescan := Yes,
	                                          ExecutePostscan := No,
	                                          ExecuteEnableInFalse := No,
	                                          CreatedDate := "2024-01-01T00:00:00.000Z",
	                                          CreatedBy := "eng")
		PARAMETERS
			EnableIn : BOOL (Usage := Input, Visible := No, Description := "Enable Input");
			In : REAL (Usage := Input, Required := Yes) := 0.0;
			Out : REAL (Usage := Output);
		END_PARAMETERS
		LOCAL_TAGS
			Factor : REAL (Radix := Float) := 2.0;
		END_LOCAL_TAGS
		ROUTINE Logic
			N: MUL(In,Factor,Out);
		END_ROUTINE
	END_ADD_ON_INSTRUCTION_DEFINITION

	TAG
		A : BOOL (Radix := Decimal) := 0;
		Counts : DINT[10] (Radix := Decimal) := [0,0,0,0,0,0,0,0,0,0];
		Start_PB OF Local:1:I.Data.0 (RADIX := Decimal);
	END_TAG

	PROGRAM MainProgram (MAIN := "MainRoutine",
	                     MODE := 0)
		TAG
			LocalFlag : BOOL := 0;
		END_TAG

		ROUTINE MainRoutine
			N: XIC(A)OTE(B);
			N: [Note]XIC(B)XIC(C)OTE(D);
		END_ROUTINE

		ROUTINE Alarms
			RC: "Latch the alarm";
			N: XIC(Fault)OTL(Alarm);
			N: XIC(Reset)OTU(Alarm);
		END_ROUTINE

		ST_ROUTINE Calc
			Out := In * 2;
		END_ST_ROUTINE
	END_PROGRAM

	TASK MainTask (Type := CONTINUOUS,
	               Priority := 10,
	               Watchdog := 500)
		MainProgram;
	END_TASK

	TASK Fast (Type := PERIODIC,
	           Rate := 10,
	           Priority := 5,
	           Watchdog := 100,
	           InhibitTask := No)
		MainProgram;
	END_TASK
END_CONTROLLER
"""


SAMPLE_L5X = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<RSLogix5000Content SchemaRevision="1.0" SoftwareRevision="32.11" TargetName="PlantCtrl" TargetType="Controller" ContainsContext="false" ExportDate="Mon Jan 01 12:00:00 2024">
<Controller Use="Target" Name="PlantCtrl" ProcessorType="1756-L83E" MajorRev="32" MinorRev="11">
<DataTypes>
<DataType Name="MotorData" Family="NoFamily" Class="User">
<Description><![CDATA[Motor record]]></Description>
<Members>
<Member Name="ZZZZZZZZZZMotorData0" DataType="SINT" Dimension="0" Radix="Decimal" Hidden="true" ExternalAccess="Read/Write"/>
<Member Name="Speed" DataType="DINT" Dimension="0" Radix="Decimal" Hidden="false" ExternalAccess="Read/Write"/>
<Member Name="Setpoints" DataType="REAL" Dimension="4" Radix="Float" Hidden="false" ExternalAccess="Read/Write"/>
</Members>
</DataType>
<DataType Name="EmptyType" Family="NoFamily" Class="User">
<Members/>
</DataType>
</DataTypes>
<Modules>
<Module Name="Local" CatalogNumber="1756-L83E" ParentModName="Local" ParentModPortId="1">
<Ports>
<Port Id="1" Address="0" Type="ICP" Upstream="false"/>
</Ports>
</Module>
<Module Name="DI_Card" CatalogNumber="1756-IB16" ParentModName="Local" ParentModPortId="1">
<Ports>
<Port Id="1" Address="3" Type="ICP" Upstream="true"/>
</Ports>
<Communications CommMethod="536870914">
<Connections>
<Connection Name="StandardInput" RPI="20000" Type="Input"/>
</Connections>
</Communications>
</Module>
</Modules>
<AddOnInstructionDefinitions>
<AddOnInstructionDefinition Name="ScaleValue" Revision="1.0" Vendor="Acme" ExecutePrescan="true" ExecutePostscan="false" ExecuteEnableInFalse="false" CreatedDate="2024-01-01T00:00:00.000Z" CreatedBy="eng" EditedDate="2024-02-01T00:00:00.000Z" EditedBy="eng">
<Description><![CDATA[Scale a value]]></Description>
<Parameters>
<Parameter Name="In" TagType="Base" DataType="REAL" Usage="Input" Radix="Float" Required="true" Visible="true" ExternalAccess="Read/Write">
<DefaultData Format="L5K"><![CDATA[0.0]]></DefaultData>
</Parameter>
<Parameter Name="Out" TagType="Base" DataType="REAL" Usage="Output" Radix="Float" Required="false" Visible="true" ExternalAccess="Read Only"/>
</Parameters>
<LocalTags>
<LocalTag Name="Factor" DataType="REAL" Radix="Float" ExternalAccess="None"/>
</LocalTags>
<Routines>
<Routine Name="Logic" Type="RLL">
<RLLContent>
<Rung Number="0" Type="N">
<Text><![CDATA[MUL(In,Factor,Out);]]></Text>
</Rung>
</RLLContent>
</Routine>
</Routines>
</AddOnInstructionDefinition>
</AddOnInstructionDefinitions>
<Tags>
<Tag Name="A" TagType="Base" DataType="BOOL" Radix="Decimal" ExternalAccess="Read/Write">
<Description><![CDATA[Start input]]></Description>
<Data Format="L5K"><![CDATA[0]]></Data>
<Data Format="Decorated">
<DataValue DataType="BOOL" Radix="Decimal" Value="0"/>
</Data>
</Tag>
<Tag Name="Speed" TagType="Base" DataType="DINT" Radix="Decimal">
<Data Format="Decorated">
<DataValue DataType="DINT" Radix="Decimal" Value="1500"/>
</Data>
</Tag>
<Tag Name="Start_PB" TagType="Alias" AliasFor="Local:1:I.Data.0" Radix="Decimal" ExternalAccess="Read/Write"/>
</Tags>
<Programs>
<Program Name="MainProgram" TestEdits="false" MainRoutineName="MainRoutine">
<Tags>
<Tag Name="LocalFlag" TagType="Base" DataType="BOOL">
<Description>
<LocalizedDescription Lang="en-US"><![CDATA[Local flag]]></LocalizedDescription>
</Description>
<Data Format="L5K"><![CDATA[0]]></Data>
</Tag>
</Tags>
<Routines>
<Routine Name="MainRoutine" Type="RLL">
<RLLContent>
<Rung Number="5" Type="N">
<Text><![CDATA[XIC(A)OTE(B);]]></Text>
</Rung>
<Rung Number="2" Type="N">
<Comment><![CDATA[Note]]></Comment>
<Text><![CDATA[XIC(B)XIC(C)OTE(D);]]></Text>
</Rung>
</RLLContent>
</Routine>
<Routine Name="Calc" Type="ST">
<STContent>
<Line Number="0"><![CDATA[Out := In * 2;]]></Line>
</STContent>
</Routine>
</Routines>
</Program>
</Programs>
<Tasks>
<Task Name="MainTask" Type="CONTINUOUS" Priority="10" Watchdog="500" DisableUpdateOutputs="false" InhibitTask="false">
<ScheduledPrograms>
<ScheduledProgram Name="MainProgram"/>
</ScheduledPrograms>
</Task>
<Task Name="Fast" Type="PERIODIC" Rate="10" Priority="5" Watchdog="100"/>
</Tasks>
</Controller>
</RSLogix5000Content>
"""


@pytest.fixture
def l5k_text():
    return SAMPLE_L5K


@pytest.fixture
def l5x_text():
    return SAMPLE_L5X
