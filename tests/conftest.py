"""Pytest configuration and fixtures."""

import copy
from datetime import date

import pytest

from txc2gtfs.process_txc.read_txc import process_xml_string

SAMPLE_TXC = """<?xml version="1.0" encoding="UTF-8"?>
<TransXChange xmlns="http://www.transxchange.org.uk/" xml:lang="en" SchemaVersion="2.4" FileName="X1.xml">
  <StopPoints>
    <AnnotatedStopPointRef>
      <StopPointRef>0100A</StopPointRef>
      <CommonName>Alpha Road</CommonName>
      <LocalityName>Bristol</LocalityName>
      <Location>
        <Longitude>-2.59</Longitude>
        <Latitude>51.45</Latitude>
      </Location>
    </AnnotatedStopPointRef>
    <AnnotatedStopPointRef>
      <StopPointRef>0100B</StopPointRef>
      <CommonName>Bravo Street</CommonName>
      <LocalityQualifier>Centre</LocalityQualifier>
      <Location>
        <Easting>530034</Easting>
        <Northing>180381</Northing>
      </Location>
    </AnnotatedStopPointRef>
    <AnnotatedStopPointRef>
      <StopPointRef>0100C</StopPointRef>
      <CommonName>Charlie</CommonName>
    </AnnotatedStopPointRef>
    <AnnotatedStopPointRef>
      <StopPointRef>0100D</StopPointRef>
      <CommonName>Delta</CommonName>
    </AnnotatedStopPointRef>
  </StopPoints>
  <RouteSections>
    <RouteSection id="RS1">
      <RouteLink id="RL1">
        <From><StopPointRef>0100A</StopPointRef></From>
        <To><StopPointRef>0100B</StopPointRef></To>
        <Track>
          <Mapping>
            <Location id="L1">
              <Longitude>-2.59</Longitude>
              <Latitude>51.45</Latitude>
            </Location>
            <Location id="L2">
              <Translation>
                <Easting>355679</Easting>
                <Northing>218477</Northing>
              </Translation>
            </Location>
          </Mapping>
        </Track>
      </RouteLink>
      <RouteLink id="RL2">
        <From><StopPointRef>0100B</StopPointRef></From>
        <To><StopPointRef>0100C</StopPointRef></To>
      </RouteLink>
    </RouteSection>
  </RouteSections>
  <Routes>
    <Route id="R1">
      <PrivateCode>X1-OUT</PrivateCode>
      <Description>Alpha to Delta</Description>
      <RouteSectionRef>RS1</RouteSectionRef>
    </Route>
  </Routes>
  <JourneyPatternSections>
    <JourneyPatternSection id="JPS1">
      <JourneyPatternTimingLink id="JPTL1">
        <From><Activity>pickUp</Activity><StopPointRef>0100A</StopPointRef><TimingStatus>PTP</TimingStatus></From>
        <To><StopPointRef>0100B</StopPointRef><TimingStatus>OTH</TimingStatus></To>
        <RunTime>PT5M</RunTime>
      </JourneyPatternTimingLink>
      <JourneyPatternTimingLink id="JPTL2">
        <From><StopPointRef>0100B</StopPointRef><TimingStatus>OTH</TimingStatus><WaitTime>PT2M</WaitTime></From>
        <To><StopPointRef>0100C</StopPointRef><TimingStatus>TIP</TimingStatus></To>
        <RunTime>PT10M</RunTime>
      </JourneyPatternTimingLink>
    </JourneyPatternSection>
    <JourneyPatternSection id="JPS2">
      <JourneyPatternTimingLink id="JPTL3">
        <From><StopPointRef>0100C</StopPointRef><TimingStatus>TIP</TimingStatus></From>
        <To><Activity>setDown</Activity><StopPointRef>0100D</StopPointRef><TimingStatus>PTP</TimingStatus></To>
        <RunTime>PT3M</RunTime>
      </JourneyPatternTimingLink>
    </JourneyPatternSection>
    <JourneyPatternSection id="JPS3"/>
  </JourneyPatternSections>
  <Operators>
    <Operator id="O1">
      <NationalOperatorCode>XBUS</NationalOperatorCode>
      <OperatorCode>XB</OperatorCode>
      <OperatorShortName>X Buses</OperatorShortName>
      <OperatorNameOnLicence xml:lang="en">X Buses Limited</OperatorNameOnLicence>
    </Operator>
  </Operators>
  <Services>
    <Service>
      <ServiceCode>PB0001:X1</ServiceCode>
      <Lines>
        <Line id="L1">
          <LineName>X1</LineName>
        </Line>
      </Lines>
      <OperatingPeriod>
        <StartDate>2024-01-01</StartDate>
        <EndDate>2024-12-31</EndDate>
      </OperatingPeriod>
      <OperatingProfile>
        <RegularDayType>
          <DaysOfWeek>
            <MondayToFriday/>
          </DaysOfWeek>
        </RegularDayType>
        <SpecialDaysOperation>
          <DaysOfNonOperation>
            <DateRange>
              <StartDate>2024-03-01</StartDate>
              <EndDate>2024-03-03</EndDate>
            </DateRange>
          </DaysOfNonOperation>
        </SpecialDaysOperation>
      </OperatingProfile>
      <RegisteredOperatorRef>O1</RegisteredOperatorRef>
      <Description>Alpha - Delta
	via Bravo</Description>
      <Mode>bus</Mode>
      <StandardService>
        <Origin>Alpha Road</Origin>
        <Destination>Delta Centre</Destination>
        <Vias>
          <Via>Bravo</Via>
        </Vias>
        <JourneyPattern id="JP1">
          <Direction>outbound</Direction>
          <RouteRef>R1</RouteRef>
          <JourneyPatternSectionRefs>JPS1</JourneyPatternSectionRefs>
          <JourneyPatternSectionRefs>JPS2</JourneyPatternSectionRefs>
        </JourneyPattern>
        <JourneyPattern id="JP2">
          <Direction>inbound</Direction>
          <RouteRef>X1-OUT</RouteRef>
          <JourneyPatternSectionRefs>JPS3</JourneyPatternSectionRefs>
        </JourneyPattern>
      </StandardService>
    </Service>
  </Services>
  <VehicleJourneys>
    <VehicleJourney>
      <PrivateCode>X1:O:1</PrivateCode>
      <Operational>
        <Block>
          <BlockNumber>101</BlockNumber>
        </Block>
        <TicketMachine>
          <TicketMachineServiceCode>X1</TicketMachineServiceCode>
          <JourneyCode>0800</JourneyCode>
        </TicketMachine>
      </Operational>
      <VehicleJourneyCode>VJ1</VehicleJourneyCode>
      <ServiceRef>PB0001:X1</ServiceRef>
      <LineRef>L1</LineRef>
      <JourneyPatternRef>JP1</JourneyPatternRef>
      <DepartureTime>08:00:00</DepartureTime>
    </VehicleJourney>
    <VehicleJourney>
      <PrivateCode>X1:O:2</PrivateCode>
      <VehicleJourneyCode>VJ2</VehicleJourneyCode>
      <ServiceRef>PB0001:X1</ServiceRef>
      <LineRef>L1</LineRef>
      <VehicleJourneyRef>VJ1</VehicleJourneyRef>
      <DepartureTime>23:50:00</DepartureTime>
    </VehicleJourney>
    <VehicleJourney>
      <PrivateCode>X1:O:3</PrivateCode>
      <OperatingProfile>
        <RegularDayType>
          <DaysOfWeek>
            <Saturday/>
            <Sunday/>
          </DaysOfWeek>
        </RegularDayType>
        <BankHolidayOperation>
          <DaysOfOperation>
            <GoodFriday/>
          </DaysOfOperation>
          <DaysOfNonOperation>
            <ChristmasDay/>
            <BoxingDay/>
          </DaysOfNonOperation>
        </BankHolidayOperation>
      </OperatingProfile>
      <VehicleJourneyCode>VJ3</VehicleJourneyCode>
      <ServiceRef>PB0001:X1</ServiceRef>
      <LineRef>L1</LineRef>
      <JourneyPatternRef>JP1</JourneyPatternRef>
      <DepartureTime>10:15</DepartureTime>
    </VehicleJourney>
    <VehicleJourney>
      <PrivateCode>X1:I:1</PrivateCode>
      <VehicleJourneyCode>VJ4</VehicleJourneyCode>
      <ServiceRef>PB0001:X1</ServiceRef>
      <LineRef>L1</LineRef>
      <JourneyPatternRef>JP2</JourneyPatternRef>
      <DepartureTime>12:00:00</DepartureTime>
    </VehicleJourney>
  </VehicleJourneys>
</TransXChange>
"""

HOLIDAYS = {
    'GoodFriday': [date(2024, 3, 29), date(2025, 4, 18)],
    'ChristmasDay': [date(2023, 12, 25), date(2024, 12, 25)],
    'BoxingDay': [date(2023, 12, 26), date(2024, 12, 26)],
    'EasterMonday': [date(2024, 4, 1)],
}


@pytest.fixture
def sample_xml():
    """A small but complete TransXChange document."""
    return SAMPLE_TXC


@pytest.fixture
def sample_document():
    """The sample document parsed into a nested record."""
    return process_xml_string(SAMPLE_TXC)


@pytest.fixture
def holidays():
    return copy.deepcopy(HOLIDAYS)


@pytest.fixture
def txc_dir(tmp_path):
    """An input directory holding the sample document and a broken one."""
    input_dir = tmp_path / 'txc'
    input_dir.mkdir()
    (input_dir / 'X1.xml').write_text(SAMPLE_TXC, encoding='utf-8')
    (input_dir / 'broken.xml').write_text(
        '<TransXChange xmlns="http://www.transxchange.org.uk/"><Services/></TransXChange>', encoding='utf-8'
    )
    (input_dir / 'notes.txt').write_text('not a schedule', encoding='utf-8')
    return input_dir
